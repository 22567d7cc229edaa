"""Settings loaded from the environment (and an optional ``.env`` file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Mapping

from dotenv import load_dotenv

DEFAULT_KEY_ID = "primary"


class ConfigurationError(RuntimeError):
    """The process is missing configuration it needs for an operation."""


@dataclass(frozen=True)
class Settings:

    data_dir: Path
    signing_key_id: str = DEFAULT_KEY_ID
    # key id -> secret; includes retired keys still accepted for verification
    signing_keys: dict[str, bytes] = field(default_factory=dict, repr=False)
    token_ttl: timedelta = timedelta(minutes=10)
    seller_points: int = 10
    buyer_points: int = 3
    trusted_seller_deals: int = 7

    @property
    def can_sign(self) -> bool:
        return self.signing_key_id in self.signing_keys


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{name} cannot be negative")
    return value


def _retired_keys(raw: str) -> dict[str, bytes]:
    """Parse ``kid:secret,kid:secret``."""
    keys: dict[str, bytes] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        key_id, sep, secret = pair.partition(":")
        if not sep or not key_id.strip() or not secret:
            raise ConfigurationError(
                "HANDOFF_RETIRED_KEYS entries must look like 'key_id:secret'"
            )
        keys[key_id.strip()] = secret.encode("utf-8")
    return keys


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from *environ* (default: ``os.environ`` plus ``.env``)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    key_id = (environ.get("HANDOFF_SIGNING_KEY_ID") or DEFAULT_KEY_ID).strip()
    keys = _retired_keys(environ.get("HANDOFF_RETIRED_KEYS", ""))
    secret = environ.get("HANDOFF_SIGNING_SECRET", "")
    if secret:
        keys[key_id] = secret.encode("utf-8")

    ttl_minutes = _int(environ, "HANDOFF_TOKEN_TTL_MINUTES", 10)
    if ttl_minutes == 0:
        raise ConfigurationError("HANDOFF_TOKEN_TTL_MINUTES must be positive")

    return Settings(
        data_dir=Path(environ.get("HANDOFF_DATA_DIR") or "data"),
        signing_key_id=key_id,
        signing_keys=keys,
        token_ttl=timedelta(minutes=ttl_minutes),
        seller_points=_int(environ, "HANDOFF_SELLER_POINTS", 10),
        buyer_points=_int(environ, "HANDOFF_BUYER_POINTS", 3),
        trusted_seller_deals=_int(environ, "HANDOFF_TRUSTED_SELLER_DEALS", 7),
    )
