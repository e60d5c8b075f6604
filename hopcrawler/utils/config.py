"""
Configuration management for the hop crawler.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class ConfigError(ValueError):
    """Raised when the configuration file is missing or invalid."""


FRONTIER_POLICIES = ('depth_first', 'breadth_first')
RETRY_SCOPES = ('shared', 'per_url')
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass
class CrawlerConfig:
    """Configuration for crawler behavior."""
    retries: int = 3
    request_timeout: int = 30
    user_agent: str = "HopCrawler/1.0"
    max_content_size: int = 10 * 1024 * 1024
    frontier_policy: str = 'depth_first'
    # 'shared' keeps one retry counter across consecutive URLs,
    # 'per_url' resets it whenever a different URL comes up
    retry_scope: str = 'shared'


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = 'INFO'
    file: Optional[str] = None
    format: str = '%(message)s'
    json: bool = False


@dataclass
class MonitoringConfig:
    """Configuration for monitoring."""
    metrics_enabled: bool = False
    prometheus_port: int = 8000


@dataclass
class Config:
    """Main configuration class."""
    crawler: CrawlerConfig = field(default_factory=CrawlerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


def _is_number(value: Any, types) -> bool:
    # bool is an int subclass but never a valid count or size
    return isinstance(value, types) and not isinstance(value, bool)


def _build_section(section_cls, name: str, data: Optional[Dict[str, Any]]):
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")

    known = {f.name for f in fields(section_cls)}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown keys in section '{name}': {', '.join(sorted(unknown))}")
    return section_cls(**data)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from a YAML file, or defaults when no path is set."""
        config_data: Dict[str, Any] = {}

        if self.config_path is not None:
            if not self.config_path.exists():
                raise ConfigError(f"Configuration file not found: {self.config_path}")

            with open(self.config_path, 'r') as file:
                try:
                    config_data = yaml.safe_load(file) or {}
                except yaml.YAMLError as e:
                    raise ConfigError(f"Invalid YAML in {self.config_path}: {e}") from e

            if not isinstance(config_data, dict):
                raise ConfigError("Configuration root must be a mapping")

        unknown = set(config_data) - {'crawler', 'logging', 'monitoring'}
        if unknown:
            raise ConfigError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

        self._config = Config(
            crawler=_build_section(CrawlerConfig, 'crawler', config_data.get('crawler')),
            logging=_build_section(LoggingConfig, 'logging', config_data.get('logging')),
            monitoring=_build_section(MonitoringConfig, 'monitoring', config_data.get('monitoring'))
        )

        self._validate_config()
        return self._config

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ConfigError("Configuration not loaded")

        crawler = self._config.crawler

        if not _is_number(crawler.retries, int) or crawler.retries < 1:
            raise ConfigError("retries must be an integer of at least 1")

        if not _is_number(crawler.request_timeout, (int, float)) or crawler.request_timeout <= 0:
            raise ConfigError("request_timeout must be a positive number")

        if not _is_number(crawler.max_content_size, int) or crawler.max_content_size <= 0:
            raise ConfigError("max_content_size must be a positive integer")

        if not isinstance(crawler.user_agent, str):
            raise ConfigError("user_agent must be a string")

        if not _is_number(self._config.monitoring.prometheus_port, int):
            raise ConfigError("prometheus_port must be an integer")

        if crawler.frontier_policy not in FRONTIER_POLICIES:
            raise ConfigError(f"frontier_policy must be one of: {', '.join(FRONTIER_POLICIES)}")

        if crawler.retry_scope not in RETRY_SCOPES:
            raise ConfigError(f"retry_scope must be one of: {', '.join(RETRY_SCOPES)}")

        level = self._config.logging.level
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self._config.logging.level}")

        logging.getLogger(__name__).debug("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ConfigError("Configuration not loaded. Call load_config() first.")
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file, falling back to defaults without a path."""
    return ConfigManager(config_path).load_config()
