"""
Centralized settings for the fee tool.
"""
import os
from dataclasses import dataclass
from typing import Optional


ENV_PREFIX = 'FEE_TOOL_'


def _env(name: str, default: str) -> str:
    return os.environ.get(f'{ENV_PREFIX}{name}', default).strip()


@dataclass
class Settings:
    """Application settings with sensible defaults."""

    # Cart attribute keys written by the checkout extension
    rules_attribute: str = '_fee_rules'
    fee_variant_attribute: str = '_fee_variant_gid'

    # Fee variant configured for the shop (served by /api/fee-variant)
    fee_variant_gid: str = ''

    log_level: str = 'INFO'

    api_host: str = '0.0.0.0'
    api_port: int = 8000

    @classmethod
    def load(cls) -> 'Settings':
        """Load settings from FEE_TOOL_* environment variables."""
        try:
            port = int(_env('API_PORT', '8000'))
        except ValueError:
            raise ValueError(f"{ENV_PREFIX}API_PORT must be an integer")

        return cls(
            rules_attribute=_env('RULES_ATTRIBUTE', '_fee_rules'),
            fee_variant_attribute=_env('FEE_VARIANT_ATTRIBUTE', '_fee_variant_gid'),
            fee_variant_gid=_env('FEE_VARIANT_GID', ''),
            log_level=_env('LOG_LEVEL', 'INFO').upper(),
            api_host=_env('API_HOST', '0.0.0.0'),
            api_port=port,
        )


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reset_settings():
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
