import json
import logging
import os
import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from .errors import ConfigError
from .models import Repository

DEFAULT_REPOSITORIES = [
    {"name": "nuclei-templates", "url": "https://github.com/projectdiscovery/nuclei-templates.git"},
    {"name": "nucleihub-templates", "url": "https://github.com/rix4uni/nucleihub-templates.git"},
]
DEFAULT_SUFFIXES = (".yaml",)
# Escaped notification headers stay far below the 4096-character message limit.
MAX_NAME_LENGTH = 100

_GITHUB_URL = re.compile(r"^(?:https://github\.com/|git@github\.com:)([^/]+)/([^/]+?)(?:\.git)?/?$")


@dataclass(frozen=True)
class Config:
    repositories: Tuple[Repository, ...]
    bot_token: Optional[str]
    chat_id: Optional[str]
    dry_run: bool = False
    suffixes: Tuple[str, ...] = DEFAULT_SUFFIXES
    state_dir: str = "."
    force_notify: bool = False
    announce_baseline: bool = False
    http_timeout: float = 20.0
    git_timeout: Optional[float] = None
    max_messages: int = 5
    max_workers: Optional[int] = None


def _env_truthy(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_number(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def default_link_base(url: str) -> str:
    """Web prefix for files of a GitHub repository, or "" for other hosts."""
    m = _GITHUB_URL.match(url.strip())
    if not m:
        return ""
    return f"https://github.com/{m.group(1)}/{m.group(2)}/blob/HEAD"


def parse_repositories(raw: Optional[str]) -> List[Repository]:
    if raw is None or not raw.strip():
        entries = DEFAULT_REPOSITORIES
    else:
        try:
            entries = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigError(f"TEMPLATE_REPOS is not valid JSON: {e}")
        if not isinstance(entries, list) or not entries:
            raise ConfigError("TEMPLATE_REPOS must be a non-empty JSON list")

    repos: List[Repository] = []
    seen: set[str] = set()
    seen_paths: set[str] = set()
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigError(f"Repository entry must be an object, got {entry!r}")
        name = str(entry.get("name") or "").strip()
        url = str(entry.get("url") or "").strip()
        if not name or not url:
            raise ConfigError(f"Repository entry needs 'name' and 'url': {entry!r}")
        if "/" in name or "\\" in name or name in {".", ".."}:
            raise ConfigError(f"Repository name must not contain path separators: {name!r}")
        if len(name) > MAX_NAME_LENGTH:
            raise ConfigError(f"Repository name longer than {MAX_NAME_LENGTH} characters: {name[:20]!r}...")
        if name in seen:
            raise ConfigError(f"Duplicate repository name: {name}")
        seen.add(name)
        path = str(entry.get("path") or name)
        abs_path = os.path.abspath(path)
        if abs_path in seen_paths:
            raise ConfigError(f"Duplicate repository path: {abs_path}")
        seen_paths.add(abs_path)
        link_base = entry.get("link_base")
        if link_base is None:
            link_base = default_link_base(url)
        repos.append(Repository(
            name=name,
            url=url,
            link_base=str(link_base).rstrip("/"),
            path=path,
        ))
    return repos


def parse_suffixes(raw: Optional[str]) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_SUFFIXES
    suffixes = tuple(s.strip() for s in raw.split(",") if s.strip())
    if not suffixes:
        raise ConfigError("TEMPLATE_SUFFIXES must list at least one suffix")
    return suffixes


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """Build the run configuration from environment variables.

    Raises ConfigError when the Telegram credentials are missing (unless
    TELEGRAM_DRY_RUN is set) or any setting is malformed.
    """
    if env is None:
        env = os.environ

    bot_token = (env.get("TELEGRAM_BOT_TOKEN") or "").strip() or None
    chat_id = (env.get("TELEGRAM_CHAT_ID") or "").strip() or None
    dry_run = _env_truthy(env, "TELEGRAM_DRY_RUN", default=False)
    if not dry_run:
        if not bot_token:
            raise ConfigError("Missing TELEGRAM_BOT_TOKEN")
        if not chat_id:
            raise ConfigError("Missing TELEGRAM_CHAT_ID")
    else:
        logging.warning("TELEGRAM_DRY_RUN is set: notifications will be logged, not sent.")

    return Config(
        repositories=tuple(parse_repositories(env.get("TEMPLATE_REPOS"))),
        bot_token=bot_token,
        chat_id=chat_id,
        dry_run=dry_run,
        suffixes=parse_suffixes(env.get("TEMPLATE_SUFFIXES")),
        state_dir=env.get("STATE_DIR") or ".",
        force_notify=_env_truthy(env, "FORCE_NOTIFY"),
        announce_baseline=_env_truthy(env, "ANNOUNCE_BASELINE"),
        http_timeout=_env_number(env, "TELEGRAM_TIMEOUT", float, 20.0),
        git_timeout=_env_number(env, "GIT_TIMEOUT", float, None),
        max_messages=_env_number(env, "MAX_MESSAGES", int, 5),
        max_workers=_env_number(env, "MAX_WORKERS", int, None),
    )
