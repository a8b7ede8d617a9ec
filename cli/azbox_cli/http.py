from __future__ import annotations

from azbox_client import KeywordClient
from azbox_client.config_types import ClientConfig

from .config import AppConfig, apply_profile, normalize_base_url, resolve_token


def make_client(
    cfg: AppConfig,
    *,
    profile: str | None,
    base_url_override: str | None,
    project_override: str | None = None,
    language_override: str | None = None,
) -> KeywordClient:
    effective_cfg = apply_profile(cfg, profile)
    base_url = normalize_base_url(base_url_override or effective_cfg.base_url, warn=True)
    return KeywordClient(
        ClientConfig(
            token=resolve_token(effective_cfg),
            project_id=project_override or effective_cfg.project_id,
            language=language_override or effective_cfg.language,
            base_url=base_url,
        )
    )
