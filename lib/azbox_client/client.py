from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

import httpx

from .config_types import ClientConfig, validate_required
from .errors import UnexpectedResponseShapeError
from .models import KeywordRecord
from .timestamps import format_iso_millis
from .transport import Transport


class KeywordClient:
    """Read-only client for the keywords of one Azbox project and language."""

    def __init__(self, cfg: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        validate_required(cfg)
        self._cfg = cfg
        self._t = Transport(cfg, transport=transport)

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    async def aclose(self) -> None:
        await self._t.aclose()

    async def __aenter__(self) -> "KeywordClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _keywords_path(self) -> str:
        return f"/projects/{quote(self._cfg.project_id, safe='')}/keywords"

    async def fetch_keywords(self, *, after_updated_at: datetime | None = None) -> list[KeywordRecord]:
        """Return every keyword of the configured project for the configured language.

        ``after_updated_at`` limits the result to keywords updated after that
        instant. Records are returned in server order without validation.
        """
        params = {"token": self._cfg.token, "language": self._cfg.language}
        if after_updated_at is not None:
            params["afterUpdatedAtStr"] = format_iso_millis(after_updated_at)

        data = await self._t.get_json(self._keywords_path(), params=params)
        if not isinstance(data, list):
            raise UnexpectedResponseShapeError(
                f"unexpected response, expected a list of keywords, got {type(data).__name__}"
            )
        return data
