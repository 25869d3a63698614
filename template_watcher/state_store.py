import logging
import os
from typing import Iterable, Set, Tuple


class StateStore:
    """Baseline of known template paths, one plain-text file per repository."""

    def __init__(self, state_dir: str = ".") -> None:
        self.state_dir = state_dir

    def path_for(self, name: str) -> str:
        return os.path.join(self.state_dir, f"known_templates_{name}.txt")

    def load(self, name: str) -> Tuple[Set[str], bool]:
        path = self.path_for(name)
        if not os.path.exists(path):
            return set(), False
        try:
            with open(path, "r", encoding="utf-8") as f:
                known = {line.rstrip("\r\n") for line in f}
        except (OSError, UnicodeDecodeError) as e:
            logging.warning("Failed to load state %s, starting a fresh baseline: %s", path, e)
            return set(), False
        known.discard("")
        return known, True

    def save(self, name: str, paths: Iterable[str]) -> None:
        path = self.path_for(name)
        os.makedirs(self.state_dir, exist_ok=True)
        tmp_path = path + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="\n") as f:
                for p in sorted(set(paths)):
                    f.write(p + "\n")
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
