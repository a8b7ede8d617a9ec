from __future__ import annotations

import logging
from typing import Any

import httpx

from .config_types import ClientConfig
from .errors import ApiError

log = logging.getLogger(__name__)


class Transport:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.AsyncBaseTransport | None = None):
        self._cfg = cfg
        self._client = httpx.AsyncClient(
            base_url=cfg.base_url.rstrip("/"),
            timeout=cfg.timeout_s,
            headers={"User-Agent": "azbox-client/0.1.0"},
            transport=transport,
            follow_redirects=True,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_json(self, path: str, *, params: dict[str, str]) -> Any:
        redacted = {k: ("***" if k == "token" else v) for k, v in params.items()}
        log.debug("GET %s params=%s", path, redacted)

        r = await self._client.get(path, params=params, headers={"Accept": "application/json"})

        if not r.is_success:
            try:
                text = r.text
            except Exception:
                text = ""
            log.debug("GET %s failed with %s", path, r.status_code)
            msg = f"failed to fetch keywords ({r.status_code})"
            if text:
                msg = f"{msg} {text}"
            raise ApiError(r.status_code, msg, text)

        return r.json()
