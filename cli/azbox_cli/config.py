from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlsplit

import tomli_w
from platformdirs import user_config_dir

from azbox_client.config_types import DEFAULT_BASE_URL

from . import console

APP_NAME = "azbox"
CONFIG_FILENAME = "config.toml"
ENV_TOKEN = "AZBOX_TOKEN"

_WARNED_BASE_URL_SCHEME = False


@dataclass
class AuthConfig:
    token: str = ""


@dataclass
class ProfileConfig:
    base_url: str = ""
    token: str = ""
    project_id: str = ""
    language: str = ""


@dataclass
class AppConfig:
    base_url: str
    auth: AuthConfig
    project_id: str = ""
    language: str = ""
    profiles: dict[str, ProfileConfig] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(
        base_url=DEFAULT_BASE_URL,
        auth=AuthConfig(token=""),
        project_id="",
        language="",
        profiles={},
    )


LOCAL_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0"})


def normalize_base_url(raw: str | None, *, warn: bool = False) -> str:
    """Strip trailing slashes and default the scheme.

    Local hosts get ``http://``, anything else ``https://``.
    """
    value = (raw or "").strip().rstrip("/")
    if not value:
        return ""
    if urlsplit(value).scheme.lower() in {"http", "https"}:
        return value

    host = urlsplit(f"//{value}").hostname or ""
    scheme = "http" if host in LOCAL_HOSTS else "https"
    normalized = f"{scheme}://{value}"
    if warn:
        _warn_once(f"base_url has no scheme, using {normalized}")
    return normalized


def _warn_once(msg: str) -> None:
    global _WARNED_BASE_URL_SCHEME
    if _WARNED_BASE_URL_SCHEME or not sys.stderr.isatty():
        return
    _WARNED_BASE_URL_SCHEME = True
    console.warn(msg)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    data: dict[str, Any] = {
        "base_url": cfg.base_url,
        "project_id": cfg.project_id,
        "language": cfg.language,
        "auth": {"token": cfg.auth.token},
    }
    if cfg.profiles:
        data["profiles"] = {
            name: {k: v for k, v in vars(p).items() if v}
            for name, p in cfg.profiles.items()
        }
    return data


def _str(raw: dict, key: str) -> str:
    return str(raw.get(key) or "").strip()


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    base_url = normalize_base_url(_str(data, "base_url"), warn=True)
    if base_url:
        cfg.base_url = base_url
    cfg.project_id = _str(data, "project_id")
    cfg.language = _str(data, "language")

    auth_raw = data.get("auth") or {}
    if isinstance(auth_raw, dict):
        cfg.auth = AuthConfig(token=_str(auth_raw, "token"))

    profiles_raw = data.get("profiles") or {}
    if isinstance(profiles_raw, dict):
        for name, prof in profiles_raw.items():
            if not isinstance(prof, dict):
                continue
            cfg.profiles[str(name)] = ProfileConfig(
                base_url=normalize_base_url(_str(prof, "base_url"), warn=True),
                token=_str(prof, "token"),
                project_id=_str(prof, "project_id"),
                language=_str(prof, "language"),
            )
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return from_toml(data)
    except FileNotFoundError:
        return default_config()


def apply_profile(cfg: AppConfig, profile: str | None) -> AppConfig:
    if not profile:
        return cfg
    prof = cfg.profiles.get(profile)
    if prof is None:
        return cfg
    return AppConfig(
        base_url=prof.base_url or cfg.base_url,
        auth=AuthConfig(token=prof.token or cfg.auth.token),
        project_id=prof.project_id or cfg.project_id,
        language=prof.language or cfg.language,
        profiles=cfg.profiles,
    )


def resolve_token(cfg: AppConfig) -> str:
    env_value = os.getenv(ENV_TOKEN, "").strip()
    if env_value:
        return env_value
    return cfg.auth.token


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
