from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import get_settings

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


def load_config(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
) -> CLIConfig:
    """Command-line overrides win over ``THERMOGRAPH_*`` environment settings."""
    settings = get_settings()
    url = base_url or settings.api_base_url or DEFAULT_BASE_URL
    if timeout is None or timeout <= 0:
        timeout = settings.http_timeout
    return CLIConfig(base_url=url.rstrip("/"), timeout=timeout)
