from dataclasses import dataclass, field
from typing import List, Optional

STATUS_INITIALIZED = "initialized"
STATUS_NOTIFIED = "notified"
STATUS_UNCHANGED = "unchanged"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class Repository:
    name: str
    url: str
    link_base: str  # web prefix for file links, "" when files are not linked
    path: str


@dataclass
class CheckResult:
    name: str
    status: str
    new_items: List[str] = field(default_factory=list)
    error: Optional[str] = None
    delivered: bool = False

    @property
    def ok(self) -> bool:
        return self.status != STATUS_FAILED
