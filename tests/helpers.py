from pathlib import Path


def write_templates(root: Path, *paths: str) -> None:
    for rel in paths:
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("id: test\n", encoding="utf-8")
