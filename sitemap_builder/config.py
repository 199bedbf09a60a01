"""
Configuration loader for the sitemap builder.
Handles environment variables and YAML defaults configuration.
"""

import os
from pathlib import Path
from typing import List, Dict, Any, Optional, Union
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Maximum number of URLs in a single sitemap file, see
# https://www.sitemaps.org/protocol.html#index
SITEMAP_URL_LIMIT = 50000


@dataclass
class BuilderConfig:
    """Main sitemap builder configuration."""
    # Base domain prepended to relative locations
    hostname: Optional[str] = None

    # Render cache period in seconds (0 disables caching)
    cache_time: float = 0

    # Index generation
    target_folder: str = "."
    sitemap_name: str = "sitemap"
    sitemap_size: int = SITEMAP_URL_LIMIT

    # Logging
    log_level: str = "INFO"

    # Static URL list (from YAML); items are strings or per-entry mappings
    urls: List[Union[str, Dict[str, Any]]] = field(default_factory=list)

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "BuilderConfig":
        """Load configuration from environment and YAML file."""
        hostname = os.getenv("SITEMAP_HOSTNAME") or None
        cache_time = float(os.getenv("SITEMAP_CACHE_TIME", "0"))
        target_folder = os.getenv("SITEMAP_TARGET_FOLDER", ".")
        sitemap_name = os.getenv("SITEMAP_NAME", "sitemap")
        sitemap_size = int(os.getenv("SITEMAP_SIZE", str(SITEMAP_URL_LIMIT)))
        log_level = os.getenv("LOG_LEVEL", "INFO")

        if config_path is None:
            config_path = Path(__file__).parent.parent / "config" / "sitemap.yaml"
        else:
            config_path = Path(config_path)

        urls = []

        if config_path.exists():
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}

            defaults = yaml_config.get("defaults", {}) or {}
            hostname = defaults.get("hostname", hostname)
            cache_time = float(defaults.get("cache_time", cache_time))
            target_folder = defaults.get("target_folder", target_folder)
            sitemap_name = defaults.get("sitemap_name", sitemap_name)
            sitemap_size = int(defaults.get("sitemap_size", sitemap_size))
            log_level = defaults.get("log_level", log_level)

            urls = yaml_config.get("urls", []) or []

        return cls(
            hostname=hostname,
            cache_time=cache_time,
            target_folder=target_folder,
            sitemap_name=sitemap_name,
            sitemap_size=sitemap_size,
            log_level=log_level,
            urls=urls,
        )


# Global config instance
_config: Optional[BuilderConfig] = None


def get_config(config_path: Optional[str] = None) -> BuilderConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = BuilderConfig.load(config_path)
    return _config


def reload_config(config_path: Optional[str] = None) -> BuilderConfig:
    """Force reload the configuration."""
    global _config
    _config = BuilderConfig.load(config_path)
    return _config
