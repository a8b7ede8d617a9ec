from __future__ import annotations
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_BASE_URL = "https://api.azbox.io/v1"
REQUIRED_FIELDS = ("token", "project_id", "language")


def validate_required(cfg) -> None:
    for name in REQUIRED_FIELDS:
        value = getattr(cfg, name, None)
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"'{name}' is required")


@dataclass(frozen=True)
class ClientConfig:
    token: str
    project_id: str
    language: str
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float | None = None

    def __post_init__(self) -> None:
        validate_required(self)
