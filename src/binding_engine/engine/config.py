"""Binding engine configuration.

Configuration controls presentation defaults only: the locale used for
locale-default formatters, the secret mask, and preview truncation.

Configuration file location priority:
1. Explicit path passed to BindingConfigLoader
2. BINDING_ENGINE_CONFIG environment variable
3. Standard location: ~/.binding-engine/config.yml
4. Built-in defaults (if no config file found)

Example config file:
```yaml
version: "1.0"
locale: de-DE
secret_mask: "********"
preview_max_length: 40
preview_max_keys: 3
```
"""

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from .locales import DEFAULT_LOCALE, SUPPORTED_LOCALES, canonical_locale_tag
from .secrets import MASKED_PREVIEW

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "BINDING_ENGINE_CONFIG"


class BindingConfig(BaseModel):
    """Root configuration model."""

    model_config = {"extra": "forbid"}

    version: str = Field(
        default="1.0",
        description="Configuration schema version",
    )
    locale: str = Field(
        default=DEFAULT_LOCALE,
        description="Default locale for previews and templates when none is passed",
    )
    secret_mask: str = Field(
        default=MASKED_PREVIEW,
        min_length=1,
        description="Preview shown for every secret variable",
    )
    preview_max_length: int = Field(
        default=30,
        ge=1,
        description="Strings longer than this are truncated in value previews",
    )
    preview_max_keys: int = Field(
        default=2,
        ge=0,
        description="Object keys listed in value previews",
    )

    @field_validator("locale")
    @classmethod
    def validate_locale(cls, v: str) -> str:
        """Canonicalize the locale tag and reject unsupported locales."""
        canonical = canonical_locale_tag(v)
        if canonical is None:
            raise ValueError(
                f"Unsupported locale '{v}'. Supported locales: {', '.join(SUPPORTED_LOCALES)}"
            )
        return canonical


class BindingConfigLoader:
    """Loader for binding engine configuration from a YAML file.

    Usage:
        ```python
        loader = BindingConfigLoader()
        config = loader.load_config()
        entries = resolve_variables(graph, lookup, "n2", {}, config=config)
        ```

    The loaded config is cached; call load_config() once at startup.
    """

    def __init__(self, config_path: str | Path | None = None):
        """Initialize config loader with optional explicit path.

        Args:
            config_path: Explicit path to config file (optional).
                If not provided, uses environment variable or standard location.
        """
        self._config: BindingConfig | None = None
        self._explicit_path = Path(config_path) if config_path else None

    def get_config_path(self) -> Path | None:
        """Determine config file path using priority order.

        Returns:
            Path to config file, or None if file doesn't exist
        """
        if self._explicit_path:
            if self._explicit_path.exists():
                return self._explicit_path
            logger.warning(f"Explicit config path does not exist: {self._explicit_path}")
            return None

        env_path_str = os.getenv(CONFIG_ENV_VAR)
        if env_path_str:
            env_path = Path(env_path_str).expanduser()
            if env_path.exists():
                return env_path
            logger.warning(f"{CONFIG_ENV_VAR} path does not exist: {env_path}")
            return None

        standard_path = Path.home() / ".binding-engine" / "config.yml"
        if standard_path.exists():
            return standard_path

        return None

    def load_config(self) -> BindingConfig:
        """Load and validate configuration.

        Returns:
            Validated BindingConfig (defaults if no config file found)

        Raises:
            ValueError: If the config file is not valid YAML or fails validation
        """
        if self._config is not None:
            return self._config

        config_path = self.get_config_path()

        if config_path is None:
            logger.info("No binding engine config file found, using defaults")
            self._config = BindingConfig()
            return self._config

        logger.info(f"Loading binding engine config from: {config_path}")

        try:
            with open(config_path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)

            # An empty file means defaults
            if raw_config is None:
                raw_config = {}
            if not isinstance(raw_config, dict):
                raise ValueError("Config file must contain a YAML dictionary")

            config = BindingConfig(**raw_config)
            logger.info(f"Loaded binding engine config: locale={config.locale}")

            self._config = config
            return config

        except (yaml.YAMLError, ValueError) as e:
            raise ValueError(f"Failed to load binding engine config from {config_path}: {e}") from e


__all__ = [
    "CONFIG_ENV_VAR",
    "BindingConfig",
    "BindingConfigLoader",
]
