import html
import logging
from typing import List, Optional, Sequence

from .models import Repository
from .telegram_client import TelegramClient

MAX_MESSAGE_LENGTH = 4096
ELLIPSIS = "…"


def build_header(repo: Repository, count: int, part: Optional[int] = None, parts: Optional[int] = None) -> str:
    header = f"🔔 <b>New templates in <code>{html.escape(repo.name)}</code> ({count}):</b>"
    if part is not None and parts is not None:
        header += f" [{part}/{parts}]"
    return header + "\n\n"


def file_link(repo: Repository, path: str) -> Optional[str]:
    if not repo.link_base:
        return None
    return f"{repo.link_base}/{path}"


def render_entry(repo: Repository, path: str, max_length: Optional[int] = None) -> str:
    """One line per path: a link when the repository has a web view, else inline code.

    With ``max_length`` the line falls back to the unlinked form, and then to a
    shortened display path, until it fits.
    """
    link = file_link(repo, path)
    if link:
        line = f'<a href="{html.escape(link, quote=True)}">{html.escape(path)}</a>'
        if max_length is None or len(line) <= max_length:
            return line
    line = f"<code>{html.escape(path)}</code>"
    if max_length is None or len(line) <= max_length:
        return line
    shown = path
    while shown and len(f"<code>{html.escape(shown)}{ELLIPSIS}</code>") > max_length:
        shown = shown[:-1]
    return f"<code>{html.escape(shown)}{ELLIPSIS}</code>"


def build_messages(repo: Repository, new_items: Sequence[str], max_length: int = MAX_MESSAGE_LENGTH) -> List[str]:
    """Render new items into messages of at most ``max_length`` characters.

    Items are split across messages on line boundaries; every message repeats
    the header, with a part marker when there is more than one.
    """
    count = len(new_items)
    # Room for the widest possible marker keeps every part under the limit.
    header_room = len(build_header(repo, count, count, count))
    body_limit = max_length - header_room
    if body_limit <= 0:
        raise ValueError(f"max_length {max_length} leaves no room for entries")

    bodies: List[List[str]] = []
    current: List[str] = []
    size = 0
    for path in new_items:
        line = render_entry(repo, path, body_limit)
        extra = len(line) + (1 if current else 0)
        if current and size + extra > body_limit:
            bodies.append(current)
            current, size = [], 0
            extra = len(line)
        current.append(line)
        size += extra
    if current:
        bodies.append(current)

    if len(bodies) <= 1:
        return [build_header(repo, count) + "\n".join(lines) for lines in bodies]
    total = len(bodies)
    return [
        build_header(repo, count, i, total) + "\n".join(lines)
        for i, lines in enumerate(bodies, start=1)
    ]


class Notifier:
    def __init__(self, client: TelegramClient, max_length: int = MAX_MESSAGE_LENGTH, max_messages: int = 5) -> None:
        self.client = client
        self.max_length = max_length
        self.max_messages = max_messages

    def notify_new_items(self, repo: Repository, new_items: Sequence[str]) -> int:
        """Deliver the new-items report; returns the number of sends made."""
        if not new_items:
            return 0
        messages = build_messages(repo, new_items, self.max_length)
        if len(messages) > self.max_messages:
            caption = build_header(repo, len(new_items)).strip()
            content = "".join(p + "\n" for p in new_items).encode("utf-8")
            self.client.send_document(f"new_templates_{repo.name}.txt", content, caption=caption)
            logging.info("[%s] Sent %d new templates as a document", repo.name, len(new_items))
            return 1
        for text in messages:
            self.client.send_message(text)
        logging.info("[%s] Notification sent (%d templates, %d message(s))", repo.name, len(new_items), len(messages))
        return len(messages)

    def notify_baseline(self, repo: Repository, count: int) -> None:
        self.client.send_message(
            f"👀 <b>Tracking started for <code>{html.escape(repo.name)}</code></b>\n\n"
            f"Baseline: {count} templates."
        )

    def notify_status(self, repo: Repository, count: int) -> None:
        self.client.send_message(
            f"✅ <b><code>{html.escape(repo.name)}</code></b>: {count} templates tracked, no new items."
        )
