from typing import Optional


class WatcherError(Exception):
    pass


class ConfigError(WatcherError, ValueError):
    pass


class MirrorError(WatcherError):
    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class TelegramError(WatcherError):
    def __init__(self, status_code: int, description: Optional[str] = None) -> None:
        self.status_code = status_code
        self.description = description
        super().__init__(f"Telegram API returned {status_code}: {description or 'no description'}")
