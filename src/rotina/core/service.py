import logging

from collections import Counter
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Dict, Iterable, List

from rotina.core.store import ActivityStore
from rotina.core.stream import Stream
from rotina.models import Activity

logger = logging.getLogger(__name__)


def activities_on(snapshot: Iterable[Activity], day: str) -> List[Activity]:
    """The activities recorded against exactly `day`, in snapshot order."""
    return [activity for activity in snapshot if activity.day == day]


def count_by_day(snapshot: Iterable[Activity]) -> Dict[str, int]:
    """Map each day present in the snapshot to its number of activities."""
    return dict(Counter(activity.day for activity in snapshot))


class RoutineService:
    """
    Day-scoped and aggregate views over the store, plus fire-and-forget
    mutations. Mutations run one at a time on a single worker thread; callers
    get a Future back and see the outcome on the next emission of their streams.
    """

    def __init__(self, store: ActivityStore, executor: Executor | None = None):
        self.store = store
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="rotina-writer")

    def activities_for_day(self, day: str) -> Stream[List[Activity]]:
        return self.store.changes().map(lambda snapshot: activities_on(snapshot, day))

    def all_activities(self) -> Stream[List[Activity]]:
        return self.store.changes().map(list)

    def summary(self) -> Stream[Dict[str, int]]:
        return self.store.changes().map(count_by_day)

    def add(self, day: str, description: str) -> Future:
        return self._launch(f"add activity for {day}", self.store.insert, day, description)

    def edit(self, activity: Activity) -> Future:
        return self._launch(f"edit activity {activity.id}", self.store.update, activity)

    def delete(self, activity: Activity) -> Future:
        return self._launch(f"delete activity {activity.id}", self.store.delete, activity)

    def close(self) -> None:
        """Finish pending mutations and stop the worker."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _launch(self, what: str, fn: Callable, *args) -> Future:
        def run():
            try:
                return fn(*args)
            except Exception:
                logger.exception("Failed to %s", what)
                return None

        try:
            return self._executor.submit(run)
        except RuntimeError as e:
            # The worker has been shut down
            logger.error("Failed to %s: %s", what, e)
            future = Future()
            future.set_result(None)
            return future
