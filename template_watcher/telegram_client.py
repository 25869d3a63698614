import logging
from typing import Callable, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import ConfigError, TelegramError

API_BASE = "https://api.telegram.org"


def _create_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=3,
        connect=3,
        read=0,
        backoff_factor=1.0,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=frozenset(["POST"]),
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class TelegramClient:
    def __init__(
        self,
        bot_token: Optional[str],
        chat_id: Optional[str],
        dry_run: bool = False,
        timeout: float = 20.0,
        session_factory: Optional[Callable[[], requests.Session]] = None,
    ) -> None:
        self.chat_id = chat_id
        self.dry_run = dry_run
        self.timeout = timeout

        if not bot_token or not chat_id:
            if self.dry_run:
                logging.warning("Telegram is in DRY_RUN mode (missing token/chat). Messages will not be sent.")
                self.base_url = None
                return
            if not bot_token:
                raise ConfigError("Missing TELEGRAM_BOT_TOKEN")
            raise ConfigError("Missing TELEGRAM_CHAT_ID")

        self.base_url = f"{API_BASE}/bot{bot_token}"
        # One session per send; sessions are never shared between threads.
        self.session_factory = session_factory or _create_session

    def _check(self, method: str, resp: requests.Response) -> None:
        if resp.ok:
            return
        try:
            body = resp.json()
        except ValueError:
            body = None
        description = body.get("description") if isinstance(body, dict) else resp.text
        logging.error("Telegram %s failed: %s %s", method, resp.status_code, description)
        raise TelegramError(resp.status_code, description)

    def send_message(self, text: str, disable_web_page_preview: bool = True) -> None:
        if self.dry_run or not self.base_url:
            logging.info("[DRY_RUN] Would send Telegram message: %s", text)
            return
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "HTML",
            "disable_web_page_preview": disable_web_page_preview,
        }
        with self.session_factory() as session:
            resp = session.post(f"{self.base_url}/sendMessage", json=payload, timeout=self.timeout)
        self._check("sendMessage", resp)

    def send_document(self, filename: str, content: bytes, caption: str = "") -> None:
        if self.dry_run or not self.base_url:
            logging.info("[DRY_RUN] Would send Telegram document %s (%d bytes): %s", filename, len(content), caption)
            return
        data = {"chat_id": self.chat_id, "caption": caption, "parse_mode": "HTML"}
        files = {"document": (filename, content, "text/plain")}
        with self.session_factory() as session:
            resp = session.post(f"{self.base_url}/sendDocument", data=data, files=files, timeout=self.timeout)
        self._check("sendDocument", resp)
