import logging
import os
from datetime import datetime, timezone

from .config import load_config
from .errors import ConfigError
from .watcher import run_all


def main() -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(threadName)s %(message)s",
    )

    try:
        config = load_config()
    except ConfigError as e:
        logging.error("Configuration error: %s", e)
        return 2

    logging.info("Template watch started for %d repositories.", len(config.repositories))
    results = run_all(config)

    failed = [r for r in results if not r.ok]
    for r in failed:
        logging.error("[%s] Check failed: %s", r.name, r.error)
    new_total = sum(len(r.new_items) for r in results)
    logging.info(
        "Check finished at %s: %d repositories, %d new templates, %d failed.",
        datetime.now(timezone.utc).isoformat(),
        len(results),
        new_total,
        len(failed),
    )
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
