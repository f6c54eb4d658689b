"""Shared test fixtures for the vision board tests."""

import sys
from pathlib import Path

import pytest

# Ensure board_server and the visionboard package are importable
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def board_file(tmp_path, monkeypatch):
    """Point the server at a fresh board file for one test."""
    import board_server

    path = tmp_path / "data" / "board.json"
    monkeypatch.setenv("VISIONBOARD_DATA", str(path))
    monkeypatch.setenv("VISIONBOARD_CONFIG", str(tmp_path / "visionboard.yaml"))
    # Config is cached per process; force a reload that sees this test's env
    monkeypatch.setattr(board_server, "_config", None)
    return path


@pytest.fixture
def client(board_file):
    from board_server import app
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
