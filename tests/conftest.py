"""
Shared pytest fixtures for rotina tests.
"""
import pytest
import tempfile
import shutil
from pathlib import Path

from rotina.core import ActivityStore, RoutineService, Workspace
from rotina.models import Activity


@pytest.fixture
def temp_rotina_dir():
    """
    Create a temporary .rotina directory for testing.
    Automatically cleans up after the test.
    """
    temp_dir = tempfile.mkdtemp(prefix="rotina_test_")
    rotina_dir = Path(temp_dir) / ".rotina"
    rotina_dir.mkdir(parents=True)

    # Create a minimal config.toml
    config_content = """
timezone = "UTC"
log_level = "WARNING"
days = ["Mon", "Tue", "Wed", "Thu", "Fri"]
"""
    (rotina_dir / "config.toml").write_text(config_content)

    yield rotina_dir

    # Cleanup
    shutil.rmtree(temp_dir)


@pytest.fixture
def store(tmp_path):
    """
    An ActivityStore backed by a fresh document.
    """
    return ActivityStore(tmp_path / "activities.toml")


@pytest.fixture
def service(store):
    """
    A RoutineService over the store fixture; its worker is stopped afterwards.
    """
    routine = RoutineService(store)
    yield routine
    routine.close()


@pytest.fixture
def workspace(temp_rotina_dir, monkeypatch):
    """
    Create a Workspace instance pointed at the temp directory.
    """
    monkeypatch.setenv("ROTINA_DIR", str(temp_rotina_dir))

    ws = Workspace()
    yield ws
    ws.close()


@pytest.fixture
def sample_activities():
    """
    A small routine: two Monday activities and one Tuesday activity.
    """
    return [
        Activity(1, "Mon", "Read chapter 1"),
        Activity(2, "Tue", "Solve exercises"),
        Activity(3, "Mon", "Review notes"),
    ]


@pytest.fixture
def sample_document_toml():
    """
    Return the TOML document for sample_activities.
    """
    return """
version = 1

[[activities]]
id = 1
day = "Mon"
description = "Read chapter 1"

[[activities]]
id = 2
day = "Tue"
description = "Solve exercises"

[[activities]]
id = 3
day = "Mon"
description = "Review notes"
"""
