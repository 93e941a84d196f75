"""Typed configuration loaded from environment variables at startup."""

from __future__ import annotations

import ipaddress
import logging
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger: logging.Logger = logging.getLogger(__name__)


def _default_cache_path() -> Path:
    return Path.home() / ".cache" / "lkg"


class BootstrapConfig(BaseSettings):
    """Fully validated bootstrap configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LKG_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    cache_path: Path = Field(default_factory=_default_cache_path)
    region: str | None = None
    vpc_cidr_block: str = "10.0.0.0/16"
    public_cidr_block: str = "10.0.0.0/24"
    private_cidr_block: str = "10.0.1.0/24"
    instance_type: str = "t3.micro"
    base_image_release: str = "jammy"
    log_level: str = "INFO"

    @field_validator("vpc_cidr_block", "public_cidr_block", "private_cidr_block")
    @classmethod
    def _check_cidr(cls, value: str) -> str:
        ipaddress.IPv4Network(value)
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level {value!r}.")
        return level

    @field_validator("cache_path")
    @classmethod
    def _expand_cache_path(cls, value: Path) -> Path:
        return value.expanduser()

    @model_validator(mode="after")
    def _check_subnets_in_network(self) -> BootstrapConfig:
        network = ipaddress.IPv4Network(self.vpc_cidr_block)
        for block in (self.public_cidr_block, self.private_cidr_block):
            if not ipaddress.IPv4Network(block).subnet_of(network):
                raise ValueError(f"Subnet {block} is outside network {self.vpc_cidr_block}.")
        return self

    @classmethod
    def load(cls) -> BootstrapConfig:
        """Load and validate configuration from the environment."""
        config = cls()
        logger.debug(
            "bootstrap_config_loaded",
            extra={
                "cache_path": str(config.cache_path),
                "region": config.region,
                "vpc_cidr_block": config.vpc_cidr_block,
                "instance_type": config.instance_type,
                "base_image_release": config.base_image_release,
            },
        )
        return config
