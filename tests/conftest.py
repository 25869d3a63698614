"""
Shared fixtures: a local checkout directory, a repository descriptor
pointing at it, and a state store rooted in a temp directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from template_watcher.config import Config
from template_watcher.models import Repository
from template_watcher.state_store import StateStore


@pytest.fixture
def checkout(tmp_path: Path) -> Path:
    root = tmp_path / "checkout"
    root.mkdir()
    return root


@pytest.fixture
def repo(checkout: Path) -> Repository:
    return Repository(
        name="demo",
        url="https://github.com/example/demo.git",
        link_base="https://github.com/example/demo/blob/HEAD",
        path=str(checkout),
    )


@pytest.fixture
def store(tmp_path: Path) -> StateStore:
    return StateStore(str(tmp_path / "state"))


@pytest.fixture
def config(repo: Repository, tmp_path: Path) -> Config:
    return Config(
        repositories=(repo,),
        bot_token="123:abc",
        chat_id="-100",
        state_dir=str(tmp_path / "state"),
    )
