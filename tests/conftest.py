"""Shared test helpers for the firmgen test suite."""

import pytest

from firmgen.components import default_registry
from firmgen.framework import default_boards
from firmgen.model import BoardDefinition, Configuration

DEFAULT_BOARD = "esp32-c6-devkitc-1"


def make_config(board: str = DEFAULT_BOARD, **sections) -> Configuration:
    """Build a Configuration from plain dicts, as the YAML loader would."""
    data = {
        "device": {"name": "test_device"},
        "esp32": {"board": board},
    }
    data.update(sections)
    return Configuration.model_validate(data)


def board(board_id: str = DEFAULT_BOARD) -> BoardDefinition:
    return default_boards().lookup(board_id)


@pytest.fixture
def c6() -> BoardDefinition:
    return board("esp32-c6-devkitc-1")


@pytest.fixture
def esp32dev() -> BoardDefinition:
    return board("esp32dev")


@pytest.fixture
def registry():
    return default_registry()
