# =============================================================================
# File: config_loader.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import json
import os
from typing import Any, Dict, Optional

from pydantic import ValidationError

from embedrt.config.appsettings import AppSettings
from embedrt.exceptions import InvalidConfigError, MissingConfigError
from embedrt.logger import get_logger
from embedrt.utils.log_sanitizer import sanitize_for_log

logger = get_logger("config_loader")

# Environment variable -> (section, field, converter)
_ENV_OVERRIDES = {
    "EMBEDRT_CACHE_PATH": ("embedding", "cache_dir", str),
    "EMBEDRT_MAX_LENGTH": ("embedding", "default_max_length", int),
    "EMBEDRT_DEFAULT_MODEL": ("embedding", "default_model", str),
    "EMBEDRT_BATCH_SIZE": ("embedding", "batch_size", int),
    "EMBEDRT_BASELINE_PROVIDER": ("embedding", "baseline_provider", str),
}


class ConfigLoader:
    __appsettings: Optional[AppSettings] = None

    @staticmethod
    def get_app_settings() -> AppSettings:
        """
        Loads AppSettings from the optional JSON file named by EMBEDRT_SETTINGS_FILE
        and applies environment overrides on top. The result is cached.
        """
        if ConfigLoader.__appsettings is not None:
            return ConfigLoader.__appsettings

        data: Dict[str, Any] = {}
        settings_file = os.getenv("EMBEDRT_SETTINGS_FILE")
        if settings_file:
            ConfigLoader._deep_update(data, ConfigLoader._load_config_data(settings_file))

        for env_name, (section, field, convert) in _ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            try:
                value = convert(raw)
            except ValueError as e:
                logger.error(
                    "Invalid value for %s: %s",
                    env_name,
                    sanitize_for_log(raw),
                )
                raise InvalidConfigError(f"Invalid value for {env_name}: {e}") from e
            data.setdefault(section, {})[field] = value

        try:
            ConfigLoader.__appsettings = AppSettings(**data)
        except ValidationError as e:
            logger.error("Invalid settings: %s", sanitize_for_log(str(e)))
            raise InvalidConfigError(f"Settings validation failed: {e}") from e

        logger.debug(
            "Loaded settings: cache_dir=%s default_model=%s",
            sanitize_for_log(ConfigLoader.__appsettings.embedding.cache_dir),
            sanitize_for_log(ConfigLoader.__appsettings.embedding.default_model),
        )
        return ConfigLoader.__appsettings

    @staticmethod
    def _deep_update(d: dict, u: dict) -> None:
        for k, v in u.items():
            if isinstance(v, dict) and isinstance(d.get(k), dict):
                ConfigLoader._deep_update(d[k], v)
            else:
                d[k] = v

    @staticmethod
    def _load_config_data(config_path: str) -> dict:
        """Loads a JSON settings file."""
        logger.debug(f"Loading config from {sanitize_for_log(config_path)}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, FileNotFoundError) as e:
            logger.error(
                "Settings file not accessible %s: %s",
                sanitize_for_log(config_path),
                sanitize_for_log(str(e)),
            )
            raise MissingConfigError(f"Cannot access settings file: {e}") from e
        except (json.JSONDecodeError, ValueError) as e:
            logger.error(
                "Invalid settings format in %s: %s",
                sanitize_for_log(config_path),
                sanitize_for_log(str(e)),
            )
            raise InvalidConfigError(f"Settings file format error: {e}") from e

        if not isinstance(data, dict):
            raise InvalidConfigError("Settings file must contain a JSON object")
        return data

    @staticmethod
    def clear_cache():
        """Clear the cached settings so the next call reloads them."""
        ConfigLoader.__appsettings = None
        logger.info("Configuration cache cleared")
