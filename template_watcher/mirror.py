import logging
import os
import subprocess
from typing import List, Optional

from .errors import MirrorError
from .models import Repository


def _git(args: List[str], timeout: Optional[float]) -> None:
    logging.debug("Running: git %s", " ".join(args))
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise MirrorError("git executable not found")
    except subprocess.TimeoutExpired:
        raise MirrorError(f"git timed out after {timeout}s")
    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        raise MirrorError(f"git exited with {result.returncode}: {stderr}", stderr=stderr)


def ensure_mirror(repo: Repository, timeout: Optional[float] = None) -> None:
    """Clone the repository shallowly on first use, pull it afterwards."""
    if not os.path.exists(repo.path):
        logging.info("[%s] Cloning %s into %s", repo.name, repo.url, repo.path)
        _git(["clone", "--depth", "1", repo.url, repo.path], timeout)
    else:
        logging.info("[%s] Updating %s", repo.name, repo.path)
        _git(["-C", repo.path, "pull", "--ff-only"], timeout)
