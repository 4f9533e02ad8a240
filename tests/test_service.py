"""
Unit tests for rotina.core.service.
"""
import logging
import pytest
from concurrent.futures import wait

from rotina.core import RoutineService
from rotina.core.service import activities_on, count_by_day
from rotina.models import Activity


class TestHelpers:
    """Test the pure view functions."""

    def test_activities_on_keeps_order(self, sample_activities):
        assert [a.id for a in activities_on(sample_activities, "Mon")] == [1, 3]

    def test_activities_on_is_exact_match(self, sample_activities):
        assert activities_on(sample_activities, "mon") == []
        assert activities_on(sample_activities, "Mo") == []

    def test_count_by_day(self, sample_activities):
        assert count_by_day(sample_activities) == {"Mon": 2, "Tue": 1}

    def test_count_by_day_empty(self):
        assert count_by_day([]) == {}


class TestStreams:
    """Test the derived streams."""

    def test_activities_for_day_only_emits_that_day(self, service):
        stream = service.activities_for_day("Mon")
        assert stream.get(timeout=1) == []

        service.add("Mon", "a").result()
        assert [a.day for a in stream.get(timeout=1)] == ["Mon"]

        service.add("Tue", "b").result()
        assert all(a.day == "Mon" for a in stream.get(timeout=1))

        added = service.add("Mon", "c").result()
        service.edit(Activity(added.id, "Tue", "c")).result()
        emitted = stream.get(timeout=1)
        assert all(a.day == "Mon" for a in emitted)
        assert [a.description for a in emitted] == ["a"]

    def test_all_activities(self, service):
        stream = service.all_activities()
        assert stream.get(timeout=1) == []
        service.add("Mon", "a").result()
        service.add("Tue", "b").result()
        assert [a.description for a in stream.get(timeout=1)] == ["a", "b"]

    def test_summary(self, service):
        stream = service.summary()
        assert stream.get(timeout=1) == {}

        first = service.add("Mon", "a").result()
        service.add("Mon", "b").result()
        service.add("Tue", "c").result()
        assert stream.get(timeout=1) == {"Mon": 2, "Tue": 1}

        service.delete(first).result()
        assert stream.get(timeout=1) == {"Mon": 1, "Tue": 1}

    def test_summary_drops_empty_days(self, service):
        added = service.add("Fri", "a").result()
        service.delete(added).result()
        assert service.summary().get(timeout=1) == {}

    def test_closed_stream_stops_receiving(self, service):
        stream = service.activities_for_day("Mon")
        stream.get(timeout=1)
        stream.close()
        service.add("Mon", "a").result()
        assert service.store._broadcaster.subscriber_count == 0


class TestMutations:
    """Test the asynchronous mutations."""

    def test_study_week_scenario(self, service):
        service.add("Wed", "Read chapter 1")
        service.add("Wed", "Solve exercises").result()

        wednesday = service.activities_for_day("Wed").get(timeout=1)
        assert {a.id for a in wednesday} == {1, 2}
        assert {a.description for a in wednesday} == {"Read chapter 1", "Solve exercises"}
        assert service.summary().get(timeout=1) == {"Wed": 2}

    def test_parallel_adds_get_distinct_ids(self, service):
        futures = [service.add("Mon", f"task {n}") for n in range(20)]
        wait(futures)
        assert sorted(f.result().id for f in futures) == list(range(1, 21))

    def test_edit_and_delete_unknown_are_noops(self, service):
        service.add("Mon", "a").result()
        assert service.edit(Activity(9, "Tue", "x")).result() is False
        assert service.delete(Activity(9, "Tue", "x")).result() is False
        assert service.store.read_all() == [Activity(1, "Mon", "a")]

    def test_failures_are_logged_not_raised(self, service, caplog, monkeypatch):
        monkeypatch.setattr(logging.getLogger("rotina"), "propagate", True)
        with caplog.at_level(logging.ERROR, logger="rotina"):
            future = service.add("", "no day")
            assert future.result() is None
        assert "Failed to add activity" in caplog.text
        assert service.store.read_all() == []

    def test_store_exceptions_do_not_reach_caller(self, service, monkeypatch):
        def explode(*args):
            raise RuntimeError("boom")
        monkeypatch.setattr(service.store, "insert", explode)
        assert service.add("Mon", "a").result() is None

    def test_close_finishes_pending_mutations(self, store):
        routine = RoutineService(store)
        for n in range(5):
            routine.add("Mon", str(n))
        routine.close()
        assert len(store.read_all()) == 5

    def test_mutations_after_close_are_logged_not_raised(self, store, caplog, monkeypatch):
        monkeypatch.setattr(logging.getLogger("rotina"), "propagate", True)
        routine = RoutineService(store)
        routine.close()

        with caplog.at_level(logging.ERROR, logger="rotina"):
            assert routine.add("Mon", "late").result() is None
            assert routine.edit(Activity(1, "Mon", "late")).result() is None
            assert routine.delete(Activity(1, "Mon", "late")).result() is None
        assert "Failed to add activity for Mon" in caplog.text
        assert store.read_all() == []
