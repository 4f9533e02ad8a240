from .config import Config
from .file_system import FileSystem
from .store import ActivityStore
from .service import RoutineService
from .stream import Broadcaster, Stream
from .toml_serializer import TomlSerializer
from .workspace import Workspace
