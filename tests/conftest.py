"""
Shared fixtures.
"""

import json
import shutil
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def schedule_file(tmp_path) -> Path:
    """A copy of the example schedule export."""
    target = tmp_path / "schedule.json"
    shutil.copy(PROJECT_ROOT / "schedule.example.json", target)
    return target


@pytest.fixture
def write_schedule(tmp_path):
    """Write a schedule document and return its path."""
    def _write(data) -> Path:
        target = tmp_path / "custom_schedule.json"
        target.write_text(json.dumps(data), encoding="utf-8")
        return target
    return _write
