import tomllib
import pendulum

from pathlib import Path

from rotina.core.config import Config
from rotina.core.file_system import FileSystem
from rotina.core.logging import configure_logging
from rotina.core.service import RoutineService
from rotina.core.store import ActivityStore


class Workspace:
    """Builds the store and service for a data directory."""

    def __init__(self, working_dir: Path | None = None):
        self.fs = FileSystem(working_dir)
        self.config = Config.from_dict(tomllib.loads(self.fs.CONFIG_PATH.read_text(encoding="utf-8")))
        configure_logging(self.config.log_level)

        self.store = ActivityStore(self.fs.data_path(self.config.data_file))
        self.routine = RoutineService(self.store)

    def now(self) -> pendulum.DateTime:
        """
        Get the current time in the configured timezone
        """
        return pendulum.now(self.config.timezone)

    def today(self) -> pendulum.Date:
        """
        Get today's date in the configured timezone.
        """
        return self.now().date()

    def day_label(self, date: pendulum.Date) -> str:
        """
        The label activities for the given date are recorded against,
        e.g. "Monday".
        """
        return date.format("dddd")

    def known_days(self) -> list[str]:
        """
        The configured days, followed by any other day that has activities.
        """
        days = list(self.config.days)
        for activity in self.store.read_all():
            if activity.day not in days:
                days.append(activity.day)
        return days

    def close(self) -> None:
        self.routine.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
