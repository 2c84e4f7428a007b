# src/serverlist/services/settings.py
from __future__ import annotations
from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

from serverlist.config import const
from serverlist.services.errors import ConfigError

_TRUE = {"1", "true", "yes", "on"}


def _parse_env_file(path: str | Path) -> Dict[str, str]:
    p = Path(path)
    if not p.is_file():
        raise ConfigError("env_file", f"env file not found: {p}")
    return {k: v for k, v in dotenv_values(p).items() if v is not None}


def _decode_key(setting: str, raw: str) -> bytes:
    try:
        data = bytes.fromhex(raw)
    except ValueError as e:
        raise ConfigError(setting, f"invalid {setting} value: not a hex string") from e
    if len(data) != 32:
        raise ConfigError(setting, f"invalid {setting} value: expected 32 bytes, got {len(data)}")
    return data


def _strip_scheme(name: str) -> str:
    for prefix in ("https://", "http://"):
        if name.startswith(prefix):
            return name[len(prefix) :]
    return name


def _optional_int(setting: str, raw: str) -> Optional[int]:
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(setting, f"invalid {setting} value: {raw!r} is not an integer") from e
    if value < 0:
        raise ConfigError(setting, f"invalid {setting} value: must be >= 0")
    return value or None


def _optional_float(setting: str, raw: str) -> Optional[float]:
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigError(setting, f"invalid {setting} value: {raw!r} is not a number") from e
    if value < 0:
        raise ConfigError(setting, f"invalid {setting} value: must be >= 0")
    return value or None


@dataclass(frozen=True, slots=True)
class Settings:
    """Everything the tool needs, resolved once at startup.

    ``entropy`` and ``tweak`` select the shared record and must be the same on
    every host that publishes into the same list.
    """

    own_name: str
    entropy: bytes = field(repr=False)
    tweak: bytes
    api_password: str = field(repr=False)
    skyd_address: str = const.DEFAULT_SKYD_ADDRESS
    ip_service_url: str = const.IP_SERVICE_URL
    max_rounds: Optional[int] = None
    deadline: Optional[float] = None
    strict_verify: bool = False
    log_level: str = const.DEFAULT_LOG_LEVEL

    @staticmethod
    def from_sources(env_file: Optional[str | Path] = None, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """Process environment first, then ``env_file``, then defaults."""
        env = os.environ if environ is None else environ
        env_file_vars = _parse_env_file(env_file) if env_file else {}

        def pick_env(key: str, default: Optional[str] = None) -> str:
            return (env.get(key) or env_file_vars.get(key) or (default or "")).strip()

        own_name = _strip_scheme(pick_env(const.ENV_OWN_NAME))
        if not own_name:
            raise ConfigError(const.ENV_OWN_NAME, f"failed to get own name. is {const.ENV_OWN_NAME} env var defined?")

        entropy_raw = pick_env(const.ENV_ENTROPY)
        if not entropy_raw:
            raise ConfigError(const.ENV_ENTROPY, f"failed to get entropy. is {const.ENV_ENTROPY} env var defined?")
        tweak_raw = pick_env(const.ENV_TWEAK)
        if not tweak_raw:
            raise ConfigError(const.ENV_TWEAK, f"failed to get tweak. is {const.ENV_TWEAK} env var defined?")

        password = pick_env(const.ENV_API_PASSWORD)
        if not password:
            raise ConfigError(const.ENV_API_PASSWORD, f"failed to get api password. is {const.ENV_API_PASSWORD} env var defined?")

        level = pick_env(const.ENV_LOG_LEVEL, const.DEFAULT_LOG_LEVEL).upper()
        return Settings(
            own_name=own_name,
            entropy=_decode_key(const.ENV_ENTROPY, entropy_raw),
            tweak=_decode_key(const.ENV_TWEAK, tweak_raw),
            api_password=password,
            skyd_address=pick_env(const.ENV_SKYD_ADDRESS, const.DEFAULT_SKYD_ADDRESS),
            ip_service_url=pick_env(const.ENV_IP_SERVICE, const.IP_SERVICE_URL),
            max_rounds=_optional_int(const.ENV_MAX_ROUNDS, pick_env(const.ENV_MAX_ROUNDS)),
            deadline=_optional_float(const.ENV_DEADLINE, pick_env(const.ENV_DEADLINE)),
            strict_verify=pick_env(const.ENV_STRICT_VERIFY).lower() in _TRUE,
            log_level=level,
        )

    def with_overrides(self, **kw) -> "Settings":
        # only runtime knobs may be overridden from the command line
        safe = {k: v for k, v in kw.items() if k in {"max_rounds", "deadline", "strict_verify", "log_level"} and v is not None}
        if "log_level" in safe:
            safe["log_level"] = str(safe["log_level"]).upper()
        return replace(self, **safe)
