"""Installer configuration — env-driven.

Centralized settings using pydantic-settings.  Reads from a .env file and
CLUSTERFORGE_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MIN_RSA_KEY_BITS = 2048


class InstallerConfig(BaseSettings):
    """Installer settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export CLUSTERFORGE_LOG_LEVEL=DEBUG
        export CLUSTERFORGE_TERRAFORM_BINARY=/usr/local/bin/terraform
        export CLUSTERFORGE_TEMPLATE_DIR=/usr/share/clusterforge/templates
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CLUSTERFORGE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # Provisioning
    terraform_binary: str = "terraform"
    template_dir: Path = Path("data/templates")
    tmp_dir: Path | None = None  # system default when unset

    # Outputs
    asset_dir: Path = Path(".clusterforge/assets")

    # Key material
    rsa_key_bits: int = MIN_RSA_KEY_BITS

    @field_validator("rsa_key_bits")
    @classmethod
    def _strong_enough(cls, value: int) -> int:
        if value < MIN_RSA_KEY_BITS:
            raise ValueError(f"rsa_key_bits must be at least {MIN_RSA_KEY_BITS}")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


# Module-level singleton: import as `from clusterforge.config import config`
config = InstallerConfig()
