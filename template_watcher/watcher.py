import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import requests

from .config import Config
from .diff import find_new_items
from .errors import MirrorError, TelegramError
from .mirror import ensure_mirror
from .models import (
    STATUS_FAILED,
    STATUS_INITIALIZED,
    STATUS_NOTIFIED,
    STATUS_UNCHANGED,
    CheckResult,
    Repository,
)
from .notifier import Notifier
from .scanner import scan_templates
from .state_store import StateStore
from .telegram_client import TelegramClient

DELIVERY_ERRORS = (requests.RequestException, TelegramError)


def _deliver(repo: Repository, what: str, send, *args) -> bool:
    try:
        send(repo, *args)
    except DELIVERY_ERRORS as e:
        logging.warning("[%s] Failed to send %s: %s", repo.name, what, e)
        return False
    return True


def check_repository(repo: Repository, config: Config, store: StateStore, notifier: Notifier) -> CheckResult:
    """Mirror, scan, diff, report and persist one repository."""
    logging.debug("[%s] Preparing", repo.name)
    try:
        ensure_mirror(repo, timeout=config.git_timeout)
    except MirrorError as e:
        logging.error("[%s] Failed to prepare repository: %s", repo.name, e)
        return CheckResult(repo.name, STATUS_FAILED, error=f"mirror: {e}")

    logging.debug("[%s] Scanning %s", repo.name, repo.path)
    try:
        current = scan_templates(repo.path, config.suffixes)
    except OSError as e:
        logging.error("[%s] Failed to scan templates: %s", repo.name, e)
        return CheckResult(repo.name, STATUS_FAILED, error=f"scan: {e}")

    logging.debug("[%s] Diffing %d templates", repo.name, len(current))
    known, existed = store.load(repo.name)
    new_items = find_new_items(known, current)

    delivered = False
    if not existed:
        status = STATUS_INITIALIZED
        logging.info("[%s] First run: recording baseline of %d templates", repo.name, len(current))
        if config.announce_baseline:
            delivered = _deliver(repo, "baseline notice", notifier.notify_baseline, len(current))
        elif config.force_notify:
            delivered = _deliver(repo, "status message", notifier.notify_status, len(current))
    elif new_items:
        status = STATUS_NOTIFIED
        logging.info("[%s] Found %d new templates", repo.name, len(new_items))
        delivered = _deliver(repo, "notification", notifier.notify_new_items, new_items)
    else:
        logging.info("[%s] No new templates", repo.name)
        if config.force_notify:
            delivered = _deliver(repo, "status message", notifier.notify_status, len(current))
        return CheckResult(repo.name, STATUS_UNCHANGED, delivered=delivered)

    logging.debug("[%s] Persisting baseline", repo.name)
    try:
        store.save(repo.name, current)
    except OSError as e:
        logging.error("[%s] Failed to update state file %s: %s", repo.name, store.path_for(repo.name), e)
        return CheckResult(repo.name, STATUS_FAILED, new_items=new_items, error=f"persist: {e}", delivered=delivered)

    if existed:
        return CheckResult(repo.name, status, new_items=new_items, delivered=delivered)
    return CheckResult(repo.name, status, delivered=delivered)


def _safe_check(repo: Repository, config: Config, store: StateStore, notifier: Notifier) -> CheckResult:
    try:
        return check_repository(repo, config, store, notifier)
    except Exception as e:
        logging.exception("[%s] Unexpected error", repo.name)
        return CheckResult(repo.name, STATUS_FAILED, error=f"unexpected: {e}")


def build_notifier(config: Config) -> Notifier:
    client = TelegramClient(
        config.bot_token,
        config.chat_id,
        dry_run=config.dry_run,
        timeout=config.http_timeout,
    )
    return Notifier(client, max_messages=config.max_messages)


def run_all(config: Config, store: Optional[StateStore] = None, notifier: Optional[Notifier] = None) -> List[CheckResult]:
    """Check every configured repository in parallel and wait for all of them."""
    if not config.repositories:
        return []
    store = store or StateStore(config.state_dir)
    notifier = notifier or build_notifier(config)
    workers = config.max_workers or len(config.repositories)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="watch") as pool:
        futures = [
            pool.submit(_safe_check, repo, config, store, notifier)
            for repo in config.repositories
        ]
        return [f.result() for f in futures]
