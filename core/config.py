"""
InflationToken settings

Settings come from three layers, later layers winning:
1. defaults below
2. an optional YAML file named by INFLATION_TOKEN_CONFIG
3. environment variables

YAML layout:

    token:
      name: InflationToken
      symbol: INF
      decimals: 18
      inflation_target: 2
      deployer: "0x..."
    env_name: prod
    allow_origins: "*"
    redis_url: ""
    log_level: INFO
"""

from __future__ import annotations
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_DEPLOYER = "0x" + "0" * 39 + "1"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    token_name: str = "InflationToken"
    token_symbol: str = "INF"
    token_decimals: int = 18
    inflation_target: int = 2
    deployer: str = DEFAULT_DEPLOYER
    env_name: str = "prod"
    allow_origins: str = "*"
    redis_url: str = ""
    log_level: str = "INFO"

    @property
    def origins(self) -> list:
        return [o.strip() for o in self.allow_origins.split(",") if o.strip()] or ["*"]


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping.")
    return data


def _to_int(raw: Any, key: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {raw!r}") from e


def _from_yaml(settings: Settings, data: Dict[str, Any]) -> Settings:
    token = data.get("token") or {}
    updates: Dict[str, Any] = {}
    if "name" in token:
        updates["token_name"] = str(token["name"])
    if "symbol" in token:
        updates["token_symbol"] = str(token["symbol"])
    if "decimals" in token:
        updates["token_decimals"] = _to_int(token["decimals"], "token.decimals")
    if "inflation_target" in token:
        updates["inflation_target"] = _to_int(token["inflation_target"], "token.inflation_target")
    if "deployer" in token:
        updates["deployer"] = str(token["deployer"])
    for key in ("env_name", "allow_origins", "redis_url", "log_level"):
        if key in data:
            updates[key] = str(data[key])
    return replace(settings, **updates)


def _from_env(settings: Settings, env: Mapping[str, str]) -> Settings:
    updates: Dict[str, Any] = {}
    if env.get("TOKEN_NAME"):
        updates["token_name"] = env["TOKEN_NAME"]
    if env.get("TOKEN_SYMBOL"):
        updates["token_symbol"] = env["TOKEN_SYMBOL"]
    if env.get("TOKEN_DECIMALS"):
        updates["token_decimals"] = _to_int(env["TOKEN_DECIMALS"], "TOKEN_DECIMALS")
    if env.get("INFLATION_TARGET"):
        updates["inflation_target"] = _to_int(env["INFLATION_TARGET"], "INFLATION_TARGET")
    if env.get("TOKEN_DEPLOYER"):
        updates["deployer"] = env["TOKEN_DEPLOYER"].strip()
    if env.get("ENV_NAME"):
        updates["env_name"] = env["ENV_NAME"]
    if env.get("ALLOW_ORIGINS"):
        updates["allow_origins"] = env["ALLOW_ORIGINS"]
    if "REDIS_URL" in env:
        updates["redis_url"] = env["REDIS_URL"].strip()
    if env.get("LOG_LEVEL"):
        updates["log_level"] = env["LOG_LEVEL"].upper()
    return replace(settings, **updates)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    env = os.environ if env is None else env
    settings = Settings()
    config_path = env.get("INFLATION_TOKEN_CONFIG", "").strip()
    if config_path:
        settings = _from_yaml(settings, _load_yaml(Path(config_path)))
    return _from_env(settings, env)
