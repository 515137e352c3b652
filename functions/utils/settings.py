"""
functions/utils/settings.py

WHAT THIS FILE IS FOR
---------------------
This module defines the *single source of truth* for runtime configuration
of the Mongo cluster tier scaler.

It is responsible for:
- Defining all supported configuration fields (via Pydantic BaseSettings)
- Loading default values from parameters/parameters.yaml
- Overriding defaults with environment variables (MONGOSCALER_*)
- Validating the tier catalog (non-empty, no blanks, no duplicates)
- Exposing a cached, fully-validated Settings object to the application

LOAD & PRECEDENCE MODEL
-----------------------
Configuration is loaded in the following order (last wins):

1) YAML defaults from:
       parameters/parameters.yaml
2) Environment variables:
       MONGOSCALER_*

List-valued fields (tier_catalog) are given as JSON in the environment:
    MONGOSCALER_TIER_CATALOG='["M10", "M20", "M30"]'

WHAT THIS FILE IS NOT FOR
-------------------------
This module is NOT responsible for:
- Running the az CLI
- Tier step computation
- Request handling

It should only define *configuration structure and loading rules*.

FAILURE POLICY SETTINGS
-----------------------
- read_failure_status:
    HTTP status returned when the current tier cannot be read
    (CLI error, unparseable output, missing sku). Default 400.
- write_failure_status:
    HTTP status returned when the update command fails. Default 500.

Both are explicit so that a deployment can choose a consistent policy
(e.g. 502 for both) without touching code.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger(__name__)

PARAMETERS_PATH = Path(__file__).resolve().parents[2] / "parameters" / "parameters.yaml"

DEFAULT_TIER_CATALOG = ["M10", "M20", "M30", "M40", "M50", "M60", "M80", "M200"]


class Settings(BaseSettings):
    """
    Runtime settings for the Mongo cluster tier scaler.

    Load order / precedence:
        1) YAML defaults (parameters/parameters.yaml)
        2) Environment variables (MONGOSCALER_*), overriding YAML
    """

    model_config = SettingsConfigDict(
        env_prefix="MONGOSCALER_",
        extra="ignore",
    )

    # Service metadata
    service_name: str = "mongocluster_tier_scaler"
    environment: str = "local"
    log_level: str = "INFO"

    # az CLI
    az_cli_path: str = "az"
    cli_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="Kill the CLI process after this many seconds. Unset means wait indefinitely.",
    )
    log_cli_output: bool = Field(
        default=True,
        description="If true, CLI stdout/stderr are written to the log.",
    )

    # Ordered smallest -> largest
    tier_catalog: List[str] = Field(default_factory=lambda: list(DEFAULT_TIER_CATALOG))

    # Failure policy
    read_failure_status: int = Field(default=400, ge=400, le=599)
    write_failure_status: int = Field(default=500, ge=400, le=599)

    @field_validator("tier_catalog")
    @classmethod
    def _validate_tier_catalog(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("tier_catalog must contain at least one tier")
        cleaned = [str(t).strip() for t in value]
        if any(not t for t in cleaned):
            raise ValueError("tier_catalog must not contain blank tier names")
        if len(set(cleaned)) != len(cleaned):
            raise ValueError("tier_catalog must not contain duplicate tiers")
        return cleaned


def _config_error(source: str, exc: Exception) -> RuntimeError:
    return RuntimeError(
        f"Invalid settings from {source}: {exc}. "
        "Fix them either in environment variables (MONGOSCALER_*) "
        f"or in {PARAMETERS_PATH}."
    )


@lru_cache(maxsize=1)
def _load_yaml_parameters() -> Dict[str, Any]:
    """
    Read parameters/parameters.yaml once per process.

    A missing file means "no YAML defaults". A file that exists but cannot
    be parsed, or is not a mapping, is a deployment error and raises.
    """
    if not PARAMETERS_PATH.exists():
        logger.warning("parameters_yaml_missing", expected=str(PARAMETERS_PATH))
        return {}

    try:
        data = yaml.safe_load(PARAMETERS_PATH.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        logger.error("parameters_yaml_unparseable", path=str(PARAMETERS_PATH), error=str(exc))
        raise _config_error(str(PARAMETERS_PATH), exc) from exc

    if not isinstance(data, dict):
        exc = TypeError(f"expected a mapping, got {type(data).__name__}")
        logger.error("parameters_yaml_not_mapping", path=str(PARAMETERS_PATH), type=type(data).__name__)
        raise _config_error(str(PARAMETERS_PATH), exc)

    logger.info("parameters_yaml_loaded", path=str(PARAMETERS_PATH), keys=sorted(data))
    return data


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Build the process-wide Settings: YAML defaults, then MONGOSCALER_* on top.

    Any invalid value, from either source, stops startup with RuntimeError.
    """
    yaml_data = _load_yaml_parameters()

    # Only the fields actually present in the environment override YAML.
    try:
        env_data = Settings().model_dump(exclude_unset=True)
    except ValidationError as exc:
        logger.error("settings_env_invalid", errors=exc.errors(include_url=False))
        raise _config_error("environment (MONGOSCALER_*)", exc) from exc

    logger.info("settings_env_overrides", fields=sorted(env_data))

    try:
        settings = Settings.model_validate({**yaml_data, **env_data})
    except ValidationError as exc:
        logger.error("settings_invalid", errors=exc.errors(include_url=False), yaml_path=str(PARAMETERS_PATH))
        raise _config_error(str(PARAMETERS_PATH), exc) from exc

    logger.info(
        "settings_loaded",
        environment=settings.environment,
        service_name=settings.service_name,
        az_cli_path=settings.az_cli_path,
        tier_catalog=settings.tier_catalog,
        cli_timeout_seconds=settings.cli_timeout_seconds,
        read_failure_status=settings.read_failure_status,
        write_failure_status=settings.write_failure_status,
    )

    return settings
