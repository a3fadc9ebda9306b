"""Pytest configuration and fixtures."""

import os
from pathlib import Path

import pytest

import scriptport.config.settings as settings_module
from scriptport.config import ScriptPortSettings, reset_settings, set_settings
from scriptport.models import Scene

# Import CLI fixtures to make them available globally
from tests.cli_fixtures import clean_runner, cli_invoke  # noqa: F401

SAMPLE_SCREENPLAY = """\
TITLE PAGE
THE LAST CUP
by
Jane Doe

FADE IN:

INT. COFFEE SHOP - MORNING

Rain streaks the window. MARY wipes the counter.

JOHN
(quietly)
Is it still open?
- I only need a minute.

MARY
We close at nine.

EXT. CITY PARK -- NIGHT

John walks alone under the lamps.

JOHN
She remembered me.

FADE OUT.

THE END
"""


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test",
    )
    config.addinivalue_line(
        "markers",
        "unit: mark test as unit test",
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep user config files and SCRIPTPORT_ variables out of every test."""
    for var in [k for k in os.environ if k.startswith("SCRIPTPORT_")]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(settings_module, "_get_config_paths", lambda: [])
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> ScriptPortSettings:
    """Default settings installed as the global instance."""
    default = ScriptPortSettings()
    set_settings(default)
    return default


@pytest.fixture
def sample_screenplay() -> str:
    """A small two-scene screenplay with a title page."""
    return SAMPLE_SCREENPLAY


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """The sample screenplay written to disk."""
    path = tmp_path / "draft.txt"
    path.write_text(SAMPLE_SCREENPLAY, encoding="utf-8")
    return path


@pytest.fixture
def beat_scenes() -> list[Scene]:
    """Scenes spread over beats in scrambled input order."""
    return [
        Scene("s5", 5, location="ROOFTOP", content="Wind.", beat_id=None),
        Scene("s3", 3, location="OFFICE", content="Typing.", beat_id="catalyst"),
        Scene("s1", 1, location="KITCHEN", content="Coffee.", beat_id="opening"),
        Scene("s4", 4, location="STREET", content="Traffic.", beat_id="opening"),
        Scene("s2", 2, location="BEDROOM", content="Alarm.", beat_id="unknown"),
    ]
