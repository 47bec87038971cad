"""Configuration management for the FoodLoop engine."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


@dataclass
class RatingConfig:
    """Supplier safety rating configuration."""

    scoring_file: str | None = None  # Path to a safety_rating.yaml override


@dataclass
class NotificationConfig:
    """Proximity notification configuration."""

    default_radius_km: float = 10.0  # Used when an organization has no radius set
    earth_radius_km: float = 6371.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"


@dataclass
class Config:
    """Main configuration container."""

    rating: RatingConfig = field(default_factory=RatingConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Load configuration from files and environment variables."""
        env_file = Path(__file__).parent.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        config = cls()

        if config_dir and config_dir.exists():
            notifications_file = config_dir / "notifications.yaml"
            if notifications_file.exists():
                config._load_yaml(notifications_file)

            rating_file = config_dir / "safety_rating.yaml"
            if rating_file.exists():
                config.rating.scoring_file = str(rating_file)

        config._load_from_env()

        return config

    def _load_yaml(self, path: Path) -> None:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._apply_yaml_config(data)

    def _apply_yaml_config(self, data: dict[str, Any]) -> None:
        """Apply YAML configuration data."""
        if "notifications" in data:
            notif = data["notifications"]
            if "default_radius_km" in notif:
                self.notifications.default_radius_km = float(notif["default_radius_km"])
            if "earth_radius_km" in notif:
                self.notifications.earth_radius_km = float(notif["earth_radius_km"])

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.logging.level = str(log["level"]).upper()

    def _load_from_env(self) -> None:
        """Override configuration from environment variables."""
        if radius := os.getenv("FOODLOOP_DEFAULT_RADIUS_KM"):
            self.notifications.default_radius_km = float(radius)
        if earth := os.getenv("FOODLOOP_EARTH_RADIUS_KM"):
            self.notifications.earth_radius_km = float(earth)
        if scoring_file := os.getenv("FOODLOOP_SCORING_FILE"):
            self.rating.scoring_file = scoring_file
        if level := os.getenv("FOODLOOP_LOG_LEVEL"):
            self.logging.level = level.upper()


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        config_dir = Path(__file__).parent.parent / "config"
        _config = Config.load(config_dir)
    return _config


def reload_config(config_dir: Path | None = None) -> Config:
    """Reload configuration (useful for testing)."""
    global _config
    _config = Config.load(config_dir)
    return _config
