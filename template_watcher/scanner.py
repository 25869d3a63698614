import logging
import os
from typing import Iterable, List

SKIP_DIRS = {".git"}


def _raise(err: OSError) -> None:
    raise err


def scan_templates(root: str, suffixes: Iterable[str]) -> List[str]:
    """Return sorted, "/"-separated paths (relative to root) of matching files.

    Traversal errors, including a missing root, propagate as OSError.
    """
    suffixes = tuple(suffixes)
    if not os.path.isdir(root):
        if not os.path.exists(root):
            raise FileNotFoundError(f"Template root does not exist: {root}")
        raise NotADirectoryError(f"Template root is not a directory: {root}")

    found: List[str] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames[:] = [d for d in dirnames if d not in SKIP_DIRS]
        for filename in filenames:
            if not filename.endswith(suffixes):
                continue
            full = os.path.join(dirpath, filename)
            if not os.path.isfile(full):
                continue
            rel = os.path.relpath(full, root)
            if "\n" in rel or "\r" in rel:
                # Baseline records are one path per line.
                logging.warning("Skipping template with a line break in its path: %r", rel)
                continue
            found.append(rel.replace(os.sep, "/"))
    found.sort()
    return found
