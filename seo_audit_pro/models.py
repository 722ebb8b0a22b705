from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, TYPE_CHECKING

from .config import AuditConfig, STATUS_ERROR, STATUS_INFO, STATUS_OK, STATUS_WARNING

if TYPE_CHECKING:
    from bs4 import BeautifulSoup


@dataclass(frozen=True)
class AuditCheck:
    id: str
    label: str
    category: str


@dataclass
class FetchedDocument:
    input_url: str
    final_url: str
    status: int
    status_text: str
    html: str
    soup: Optional["BeautifulSoup"] = None


@dataclass(frozen=True)
class ReportItem:
    test: str
    extra_info: str
    details: str
    status: str = STATUS_INFO
    check_id: str = ""

    def to_dict(self) -> dict:
        return {
            "check_id": self.check_id,
            "test": self.test,
            "status": self.status,
            "extra_info": self.extra_info,
            "details": self.details,
        }


@dataclass(frozen=True)
class AuditRunContext:
    """Everything one audit run needs, frozen when the run starts."""
    url: str
    checks: FrozenSet[str]
    generation: int = 0
    config: AuditConfig = field(default_factory=AuditConfig)

    def wants(self, check_id: str) -> bool:
        return check_id in self.checks


@dataclass
class RobotsResult:
    url: str
    content: Optional[str]
    error: Optional[str]
    sitemap_urls: List[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.content is not None


@dataclass
class LinkProbe:
    url: str
    status: int
    error: Optional[str] = None
    internal: bool = True

    @property
    def broken(self) -> bool:
        return self.error is not None or self.status >= 400


STATUS_ICONS = {
    STATUS_OK: "[OK]",
    STATUS_INFO: "[i]",
    STATUS_WARNING: "[!]",
    STATUS_ERROR: "[X]",
}
