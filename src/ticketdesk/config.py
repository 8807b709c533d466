"""
Configuration loader for TicketDesk.
Loads configuration from YAML files and environment variables.
"""

from typing import Dict, Any, Optional
from pathlib import Path
import yaml
import os
from pydantic import BaseModel, ConfigDict
import logging

logger = logging.getLogger(__name__)


class TicketDeskConfig(BaseModel):
    """Main TicketDesk configuration."""

    model_config = ConfigDict(extra="allow")

    # Environment
    environment: str = "development"
    debug: bool = False

    # Supabase project
    supabase_url: str = ""
    supabase_key: str = ""

    # Base URL the magic link sends the caller back to.
    # Empty means the Origin of the page that asked for the link.
    auth_redirect_url: str = ""

    # API
    api_prefix: str = "/api"

    # Logging
    log_level: str = "INFO"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


class ConfigLoader:
    """Load and manage TicketDesk configuration."""

    def __init__(self, config_dir: str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
        """
        self.config_dir = Path(config_dir)
        self.config: Optional[TicketDeskConfig] = None
        self.load()

    def load(self) -> TicketDeskConfig:
        """Load configuration from YAML and environment variables."""

        env = os.getenv("TICKETDESK_ENV", "development")
        config_file = self.config_dir / f"{env}.yaml"

        # Load default config first
        default_config = self._load_yaml(self.config_dir / "default.yaml")

        # Override with environment-specific config
        if config_file.exists():
            default_config.update(self._load_yaml(config_file))
        else:
            logger.debug(f"Config file not found: {config_file}, using defaults")

        # Environment variables win over files
        default_config.update(self._load_from_env())
        default_config.setdefault("environment", env)

        self.config = TicketDeskConfig(**default_config)

        logger.info(f"Configuration loaded (environment: {self.config.environment})")

        return self.config

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML config file."""
        if not path.exists():
            return {}

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
                return data or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load YAML config {path}: {e}")
            return {}

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config = {}

        if supabase_url := os.getenv("SUPABASE_URL"):
            config["supabase_url"] = supabase_url
        if supabase_key := os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY"):
            config["supabase_key"] = supabase_key
        if redirect_url := os.getenv("AUTH_REDIRECT_URL"):
            config["auth_redirect_url"] = redirect_url.rstrip("/")

        if log_level := os.getenv("TICKETDESK_LOG_LEVEL"):
            config["log_level"] = log_level.upper()

        return config

    def get(self) -> TicketDeskConfig:
        """Get current configuration."""
        if not self.config:
            self.load()
        return self.config


# Global config instance
_global_config_loader: Optional[ConfigLoader] = None


def get_config() -> TicketDeskConfig:
    """Get the global TicketDesk configuration."""
    global _global_config_loader
    if _global_config_loader is None:
        _global_config_loader = ConfigLoader()
    return _global_config_loader.get()

