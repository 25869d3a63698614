from typing import AbstractSet, Iterable, List


def find_new_items(known: AbstractSet[str], current: Iterable[str]) -> List[str]:
    """Paths of ``current`` absent from ``known``, in ``current`` order."""
    new_items: List[str] = []
    seen: set[str] = set()
    for path in current:
        if path in known or path in seen:
            continue
        seen.add(path)
        new_items.append(path)
    return new_items
