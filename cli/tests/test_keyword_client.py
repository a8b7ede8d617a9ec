from __future__ import annotations

import asyncio
import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest

from azbox_client import (
    ApiError,
    ClientConfig,
    ConfigurationError,
    KeywordClient,
    UnexpectedResponseShapeError,
)


def _cfg(**overrides) -> ClientConfig:
    values = {"token": "tok", "project_id": "proj", "language": "ES"}
    values.update(overrides)
    return ClientConfig(**values)


def _fetch(client: KeywordClient, **kwargs):
    async def _run():
        async with client:
            return await client.fetch_keywords(**kwargs)

    return asyncio.run(_run())


def _recording_transport(response: httpx.Response, seen: list[httpx.Request]) -> httpx.MockTransport:
    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response

    return httpx.MockTransport(_handler)


@pytest.mark.parametrize("missing", ["token", "project_id", "language"])
def test_config_requires_field(missing) -> None:
    with pytest.raises(ConfigurationError, match=missing):
        _cfg(**{missing: ""})


def test_config_rejects_none_value() -> None:
    with pytest.raises(ConfigurationError):
        _cfg(token=None)


def test_client_rejects_unvalidated_config() -> None:
    class _LooseConfig:
        token = "tok"
        project_id = "proj"
        language = ""
        base_url = "https://api.azbox.io/v1"
        timeout_s = None

    with pytest.raises(ConfigurationError, match="language"):
        KeywordClient(_LooseConfig())


def test_config_defaults_base_url() -> None:
    assert _cfg().base_url == "https://api.azbox.io/v1"


def test_construction_performs_no_request() -> None:
    seen: list[httpx.Request] = []
    KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, json=[]), seen))
    assert seen == []


def test_fetch_builds_request() -> None:
    seen: list[httpx.Request] = []
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, json=[]), seen))

    assert _fetch(client) == []

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "GET"
    assert request.url.host == "api.azbox.io"
    assert request.url.path == "/v1/projects/proj/keywords"
    assert request.url.params["token"] == "tok"
    assert request.url.params["language"] == "ES"
    assert "afterUpdatedAtStr" not in request.url.params
    assert request.headers["Accept"] == "application/json"
    assert request.content == b""


def test_fetch_encodes_project_id() -> None:
    seen: list[httpx.Request] = []
    client = KeywordClient(
        _cfg(project_id="a/b?c"),
        transport=_recording_transport(httpx.Response(200, json=[]), seen),
    )

    _fetch(client)

    assert seen[0].url.raw_path.startswith(b"/v1/projects/a%2Fb%3Fc/keywords")
    assert seen[0].url.params["token"] == "tok"


def test_fetch_respects_custom_base_url() -> None:
    seen: list[httpx.Request] = []
    client = KeywordClient(
        _cfg(base_url="http://localhost:8080/api/"),
        transport=_recording_transport(httpx.Response(200, json=[]), seen),
    )

    _fetch(client)

    assert seen[0].url.host == "localhost"
    assert seen[0].url.path == "/api/projects/proj/keywords"


def test_fetch_sends_after_updated_at() -> None:
    seen: list[httpx.Request] = []
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, json=[]), seen))

    _fetch(client, after_updated_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc))

    assert seen[0].url.params["afterUpdatedAtStr"] == "2024-01-15T10:30:00.000Z"


def test_fetch_converts_after_updated_at_to_utc() -> None:
    seen: list[httpx.Request] = []
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, json=[]), seen))
    madrid = timezone(timedelta(hours=1))

    _fetch(client, after_updated_at=datetime(2024, 1, 15, 11, 30, 0, 123456, tzinfo=madrid))

    assert seen[0].url.params["afterUpdatedAtStr"] == "2024-01-15T10:30:00.123Z"


def test_fetch_returns_records_with_extra_fields() -> None:
    body = [
        {"id": "k1", "data": {"translation": "Hola", "plural": {"other": "Holas"}}},
        {"id": "k2", "data": {"translation": "Adios"}, "extra": 1},
    ]
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, json=body), []))

    assert _fetch(client) == body


def test_fetch_passes_malformed_records_through() -> None:
    body = [{"data": {}}, "not-a-record", {"id": "k3"}]
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, json=body), []))

    assert _fetch(client) == body


def test_fetch_raises_api_error_with_body() -> None:
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(404, text="not found"), []))

    with pytest.raises(ApiError) as exc_info:
        _fetch(client)

    assert exc_info.value.status_code == 404
    assert exc_info.value.details == "not found"
    assert "not found" in str(exc_info.value)
    assert "404" in str(exc_info.value)


def test_fetch_raises_api_error_on_empty_error_body() -> None:
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(500), []))

    with pytest.raises(ApiError) as exc_info:
        _fetch(client)

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == ""


def test_fetch_rejects_non_list_body() -> None:
    client = KeywordClient(
        _cfg(),
        transport=_recording_transport(httpx.Response(200, json={"error": "bad"}), []),
    )

    with pytest.raises(UnexpectedResponseShapeError):
        _fetch(client)


def test_fetch_propagates_json_errors() -> None:
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, text="<html>"), []))

    with pytest.raises(json.JSONDecodeError):
        _fetch(client)


def test_fetch_propagates_transport_errors() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    client = KeywordClient(_cfg(), transport=httpx.MockTransport(_handler))

    with pytest.raises(httpx.ConnectError):
        _fetch(client)


def test_repeated_calls_send_independent_requests() -> None:
    seen: list[httpx.Request] = []
    client = KeywordClient(_cfg(), transport=_recording_transport(httpx.Response(200, json=[]), seen))
    after = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    async def _run():
        async with client:
            await client.fetch_keywords(after_updated_at=after)
            await client.fetch_keywords(after_updated_at=after)

    asyncio.run(_run())

    assert len(seen) == 2
    assert seen[0].url == seen[1].url


def test_fetch_does_not_log_token(caplog) -> None:
    client = KeywordClient(
        _cfg(token="secret-token"),
        transport=_recording_transport(httpx.Response(200, json=[]), []),
    )

    with caplog.at_level("DEBUG", logger="azbox_client"):
        _fetch(client)

    assert "secret-token" not in caplog.text
    assert "/projects/proj/keywords" in caplog.text


def test_fetch_follows_redirects() -> None:
    seen: list[httpx.Request] = []
    body = [{"id": "k1", "data": {}}]

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.startswith("/v1/"):
            return httpx.Response(301, headers={"Location": "https://api.azbox.io/v2/projects/proj/keywords"})
        return httpx.Response(200, json=body)

    client = KeywordClient(_cfg(), transport=httpx.MockTransport(_handler))

    assert _fetch(client) == body
    assert [r.url.path for r in seen] == ["/v1/projects/proj/keywords", "/v2/projects/proj/keywords"]


def test_fetch_propagates_undecodable_body() -> None:
    client = KeywordClient(
        _cfg(),
        transport=_recording_transport(httpx.Response(200, content=b"\xff\xfe[\x80]"), []),
    )

    with pytest.raises(ValueError):
        _fetch(client)
