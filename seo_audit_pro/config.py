from __future__ import annotations

from dataclasses import dataclass


# ----------------------------
# Defaults
# ----------------------------

DEFAULT_RELAY = "https://corsproxy.io/?"
USER_AGENT = "Mozilla/5.0 (compatible; SEOAuditPro/1.0; +https://github.com/seo-audit-pro)"
DEFAULT_TIMEOUT_SEC = 25
DEFAULT_MAX_CONCURRENT_PROBES = 10

# Report item statuses
STATUS_OK = "ok"
STATUS_INFO = "info"
STATUS_WARNING = "warning"
STATUS_ERROR = "error"

# Heuristics
TITLE_MAX = 60
DESC_MAX = 160
TOP_KEYWORDS_LIMIT = 10
MIN_KEYWORD_LENGTH = 3


@dataclass
class AuditConfig:
    relay: str = DEFAULT_RELAY
    timeout_sec: int = DEFAULT_TIMEOUT_SEC
    user_agent: str = USER_AGENT
    # 0 disables the cap and fires every link probe at once
    max_concurrent_probes: int = DEFAULT_MAX_CONCURRENT_PROBES
    ignore_https_errors: bool = False

    @property
    def timeout_ms(self) -> int:
        return self.timeout_sec * 1000
