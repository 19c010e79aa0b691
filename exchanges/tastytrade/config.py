from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .client import DEFAULT_BASE_URL, SANDBOX_BASE_URL, TastytradeCredentials


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )


def load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError("Config root must be a mapping (YAML dict).")
    return data


def env_flag(name: str, default: str = "0") -> bool:
    v = os.getenv(name, default).strip().lower()
    return v in {"1", "true", "yes", "y", "on"}


def require_env(name: str) -> str:
    v = os.getenv(name)
    if not v or not v.strip():
        raise RuntimeError(f"Missing required env var: {name}")
    return v.strip()


def resolve_env(val: Optional[str]) -> str:
    """`$NAME` reads the environment; anything else is taken literally."""
    if not val:
        return ""
    if val.startswith("$"):
        return os.environ.get(val[1:], "").strip()
    return val.strip()


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    api_version: str = ""
    log_level: str = "INFO"
    login_env: str = "TT_USER"
    password_env: str = "TT_PASSWORD"


def load_config(path: Union[str, Path, None] = None) -> ClientConfig:
    """
    Build the client configuration.

    Precedence, lowest first: defaults, the YAML file (`app` and `tastytrade`
    sections), then `TT_SANDBOX`, `TT_BASE_URL` and `TT_API_VERSION` from the
    environment. Call `load_dotenv()` first if a `.env` file should count.
    """
    cfg = load_yaml(Path(path)) if path else {}
    app = cfg.get("app") or {}
    tt = cfg.get("tastytrade") or {}
    if not isinstance(app, dict) or not isinstance(tt, dict):
        raise ValueError("Config sections 'app' and 'tastytrade' must be mappings.")

    sandbox = bool(tt.get("sandbox", False)) or env_flag("TT_SANDBOX", "0")
    base_url = resolve_env(tt.get("base_url")) or (SANDBOX_BASE_URL if sandbox else DEFAULT_BASE_URL)
    base_url = os.getenv("TT_BASE_URL", "").strip() or base_url

    api_version = resolve_env(str(tt.get("api_version") or ""))
    api_version = os.getenv("TT_API_VERSION", "").strip() or api_version

    return ClientConfig(
        base_url=base_url.rstrip("/"),
        api_version=api_version,
        log_level=str(app.get("log_level", "INFO")),
        login_env=str(tt.get("login_env") or "TT_USER"),
        password_env=str(tt.get("password_env") or "TT_PASSWORD"),
    )


def load_credentials(config: Optional[ClientConfig] = None) -> TastytradeCredentials:
    config = config or ClientConfig()
    return TastytradeCredentials(
        login=require_env(config.login_env),
        password=require_env(config.password_env),
    )
