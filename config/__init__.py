"""
Configuration Module for the OCR Invoice Parser.

Locale keyword sets, the default tax rate and the other heuristic
constants live in settings.yaml. Extractors read them once, in their
constructors, through get_config("dot.key", default).
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from invoice_parser.utils.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "settings.yaml"

# Sections the extraction stages cannot run sensibly without
REQUIRED_SECTIONS = ('locale', 'financial', 'line_items')


class ConfigurationManager:
    """
    Read-only access to the parser settings.

    One instance is shared by the whole process. A custom settings
    file is honored only on the first construction; call reset() to
    load another one.

    Attributes:
        config_path (Path): Path to the settings file.

    Example:
        >>> config = ConfigurationManager()
        >>> config.get("financial.default_tax_rate")
        21
        >>> config.get("locale.primary.name")
        'Dutch'
    """

    _instance: Optional['ConfigurationManager'] = None

    def __new__(cls, config_path: Optional[str] = None) -> 'ConfigurationManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Load the settings file on first use.

        Args:
            config_path: Optional path to a settings file.
                        Defaults to config/settings.yaml.

        Raises:
            FileNotFoundError: If the settings file doesn't exist.
            ConfigurationError: If a required section is missing.
        """
        if self._initialized:
            return

        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._config: Dict[str, Any] = self._load(self.config_path)
        self._initialized = True

    @staticmethod
    def _load(path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        missing = [name for name in REQUIRED_SECTIONS if not isinstance(config.get(name), dict)]
        if missing:
            raise ConfigurationError(str(path), missing)

        # Relative output paths are anchored at the project root
        project_root = Path(__file__).parent.parent
        for key, value in (config.get('paths') or {}).items():
            if value and not Path(value).is_absolute():
                config['paths'][key] = str(project_root / value)

        return config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            >>> config.get("payment.terms_template")
            '{days} dagen'
            >>> config.get("nonexistent.key", "default_value")
            'default_value'
        """
        value = self._config
        try:
            for part in key.split('.'):
                value = value[part]
        except (KeyError, TypeError):
            return default
        return value

    @classmethod
    def reset(cls) -> None:
        """Drop the shared instance so the next construction reloads."""
        cls._instance = None


def get_config(key: str, default: Any = None) -> Any:
    """Shortcut for ConfigurationManager().get(key, default)."""
    return ConfigurationManager().get(key, default)


__all__ = ['ConfigurationManager', 'ConfigurationError', 'get_config', 'REQUIRED_SECTIONS']
