import logging
import os
import tempfile
import threading
import tomllib

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from rotina.core.stream import Broadcaster, Stream
from rotina.core.toml_serializer import TomlSerializer
from rotina.models import Activity

logger = logging.getLogger(__name__)

Snapshot = Tuple[Activity, ...]


class ActivityStore:
    """
    Sole owner of the activities document.

    Every mutation is a read-modify-write of the whole collection, performed
    under one lock, and every successful write is published to subscribers of
    `changes()` as a full snapshot.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()
        self._broadcaster: Broadcaster[Snapshot] = Broadcaster()
        self._last: Optional[Snapshot] = None

    @staticmethod
    def next_id(current: Sequence[Activity]) -> int:
        return max((activity.id for activity in current), default=0) + 1

    def read_all(self) -> List[Activity]:
        """
        Returns the persisted collection. A missing or unreadable document is
        treated as an empty collection.
        """
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("Could not read %s, treating it as empty: %s", self.path, e)
            return []

        try:
            return TomlSerializer.deserialize(raw.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError, ValueError, TypeError) as e:
            logger.warning("Could not decode %s, treating it as empty: %s", self.path, e)
            return []

    def write_all(self, activities: Sequence[Activity]) -> bool:
        """
        Replaces the persisted collection. The document is written beside the
        target and renamed over it, so readers see either the old or the new
        document. Returns False, leaving the old document in place, on failure.
        """
        with self._lock:
            snapshot = tuple(activities)
            try:
                self._replace(TomlSerializer.serialize(snapshot))
            except (OSError, TypeError, ValueError) as e:
                logger.error("Failed to write %s: %s", self.path, e)
                return False

            logger.debug("Wrote %d activities to %s", len(snapshot), self.path)
            self._publish(snapshot)
            return True

    def insert(self, day: str, description: str) -> Optional[Activity]:
        with self._lock:
            current = self.read_all()
            activity = Activity(self.next_id(current), day, description)
            if not self.write_all(current + [activity]):
                return None
            logger.info("Added activity %d for %s", activity.id, day)
            return activity

    def update(self, activity: Activity) -> bool:
        with self._lock:
            current = self.read_all()
            for index, existing in enumerate(current):
                if existing.id == activity.id:
                    current[index] = activity
                    return self.write_all(current)
            logger.info("No activity %d to update", activity.id)
            return False

    def delete(self, activity: Activity) -> bool:
        with self._lock:
            current = self.read_all()
            remaining = [a for a in current if a.id != activity.id]
            if len(remaining) == len(current):
                logger.info("No activity %d to delete", activity.id)
                return False
            return self.write_all(remaining)

    def changes(self) -> Stream[Snapshot]:
        """
        Subscribe to the collection. The stream starts with the current state
        and receives a new snapshot after every successful write.
        """
        with self._lock:
            snapshot = tuple(self.read_all())
            # Bring existing subscribers up to date with outside writes too
            if snapshot != self._last:
                self._publish(snapshot)
            return self._broadcaster.subscribe(snapshot)

    def refresh(self) -> bool:
        """
        Re-read the document and publish it if it differs from the last
        published snapshot, e.g. after another process wrote to it.
        """
        with self._lock:
            snapshot = tuple(self.read_all())
            if snapshot == self._last:
                return False
            self._publish(snapshot)
            return True

    def _publish(self, snapshot: Snapshot) -> None:
        self._last = snapshot
        self._broadcaster.publish(snapshot)

    def _replace(self, contents: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(contents)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
