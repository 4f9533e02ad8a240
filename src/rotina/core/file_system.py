import os
import tomli_w

from pathlib import Path

from rotina.exceptions import NestedRepoExistsError


class FileSystem:
    """Locates the rotina data directory and the files inside it."""

    ROOT_NAME = ".rotina"
    ENV_VAR = "ROTINA_DIR"
    CONFIG_NAME = "config.toml"

    def __init__(self, working_dir: Path | None = None):
        self.working_dir = working_dir or Path.cwd()

        self.DATA_DIR = self.find_data_dir()
        self.CONFIG_PATH = self.DATA_DIR / self.CONFIG_NAME

    def data_path(self, data_file: str) -> Path:
        """
        Returns the path to the activities document. Relative names are
        resolved against the data directory.
        """
        path = Path(data_file).expanduser()
        return path if path.is_absolute() else self.DATA_DIR / path

    def find_data_dir(self) -> Path:
        """
        Returns the data directory: $ROTINA_DIR if set, otherwise the nearest
        `.rotina` directory above the working directory.
        Raises:
            FileNotFoundError: If neither is available.
        """
        override = os.getenv(self.ENV_VAR)
        if override:
            data_dir = Path(override)
            if not data_dir.is_dir():
                raise FileNotFoundError(f"{self.ENV_VAR} points at {data_dir}, which is not a directory.")
            return data_dir
        return self.find_root(self.working_dir) / self.ROOT_NAME

    @classmethod
    def find_root(cls, search_start: Path) -> Path:
        """
        Search upwards from a given path for a `.rotina` directory.
        Args:
            search_start (Path): The path to start searching from.
        Returns:
            Path: The path to the directory containing `.rotina`.
        Raises:
            FileNotFoundError: If no `.rotina` directory is found in the path hierarchy.
        """
        possible_root = Path(search_start).absolute()

        while True:
            if (possible_root / cls.ROOT_NAME).is_dir():
                return possible_root
            next_possible_root = possible_root.parent
            if next_possible_root == possible_root:
                raise FileNotFoundError(
                    f"No {cls.ROOT_NAME} directory found from start {search_start}.")
            possible_root = next_possible_root

    @classmethod
    def initialise(cls, target_dir: Path | None = None, force: bool = False,
                   config: dict | None = None) -> Path:
        """
        Create a data directory holding a default config.toml and return it.

        With $ROTINA_DIR set, that directory is initialised in place. Otherwise
        a `.rotina` directory is created inside `target_dir` (default: cwd).
        """
        override = os.getenv(cls.ENV_VAR)
        if override:
            data_dir = Path(override)
        else:
            target_dir = Path(target_dir or Path.cwd()).absolute()
            try:
                existing = cls.find_root(target_dir)
            except FileNotFoundError:
                # We're expecting there not to be a root in this case.
                existing = None
            if existing is not None and existing != target_dir and not force:
                raise NestedRepoExistsError(existing)
            data_dir = target_dir / cls.ROOT_NAME

        config_path = data_dir / cls.CONFIG_NAME
        if config_path.exists():
            raise FileExistsError(f"{data_dir} is already initialised.")

        data_dir.mkdir(parents=True, exist_ok=True)
        config_path.write_text(tomli_w.dumps(config or {}))
        return data_dir
