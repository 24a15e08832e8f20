#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for all application configuration,
including environment variables, defaults, and validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict

from core.env_loader import load_env_file
from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class DatabaseConfig:
    """Supabase connection configuration."""
    supabase_url: str
    supabase_service_key: str
    alerts_table: str = "alerts"
    profiles_table: str = "profiles"
    sources_table: str = "rss_sources"


@dataclass
class IntegrationConfig:
    """External integration configuration."""
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    push_provider: str = "supabase"
    firebase_server_key: Optional[str] = None


@dataclass
class ApplicationConfig:
    """Core application configuration."""
    # RSS feed settings
    feed_timeout: int = 10
    feed_user_agent: str = "Mozilla/5.0 (compatible; AlertRelay/1.0)"
    max_concurrent_feeds: int = 5

    # Deduplication settings
    existing_alerts_window_hours: int = 24
    title_duplicate_threshold: float = 0.85
    content_duplicate_threshold: float = 0.6

    # Classification settings
    classification_batch_size: int = 5
    classification_batch_delay: float = 1.0

    # Logging
    log_level: str = "INFO"
    verbose_logging: bool = False


@dataclass
class Config:
    """Master configuration container."""
    database: DatabaseConfig
    integrations: IntegrationConfig
    app: ApplicationConfig

    environment: str = field(default_factory=lambda: os.getenv('ENVIRONMENT', 'development'))

    def has_openai(self) -> bool:
        """Check if OpenAI classification is available."""
        return bool(self.integrations.openai_api_key)


class ConfigManager:
    """Manages application configuration with validation and environment loading."""

    def __init__(self, env_file_path: str = ".env"):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to .env file relative to project root
        """
        self._config: Optional[Config] = None
        load_env_file(env_file_path)

    def get_config(self, force_reload: bool = False) -> Config:
        """
        Get application configuration.

        Args:
            force_reload: Force reloading configuration from environment

        Returns:
            Complete configuration object
        """
        if self._config is None or force_reload:
            self._config = self._build_config()
        return self._config

    def _build_config(self) -> Config:
        """Build configuration from environment variables."""

        database_config = DatabaseConfig(
            supabase_url=self._get_required_env('SUPABASE_URL'),
            supabase_service_key=self._get_required_env('SUPABASE_SERVICE_KEY'),
            alerts_table=os.getenv('ALERTS_TABLE', 'alerts'),
            profiles_table=os.getenv('PROFILES_TABLE', 'profiles'),
            sources_table=os.getenv('SOURCES_TABLE', 'rss_sources')
        )

        integration_config = IntegrationConfig(
            openai_api_key=os.getenv('OPENAI_API_KEY'),
            openai_model=os.getenv('OPENAI_MODEL', 'gpt-4o-mini'),
            push_provider=os.getenv('PUSH_PROVIDER', 'supabase').lower(),
            firebase_server_key=os.getenv('FIREBASE_SERVER_KEY')
        )

        app_config = ApplicationConfig(
            feed_timeout=int(os.getenv('FEED_TIMEOUT', '10')),
            feed_user_agent=os.getenv('FEED_USER_AGENT', 'Mozilla/5.0 (compatible; AlertRelay/1.0)'),
            max_concurrent_feeds=int(os.getenv('MAX_CONCURRENT_FEEDS', '5')),
            existing_alerts_window_hours=int(os.getenv('EXISTING_ALERTS_WINDOW_HOURS', '24')),
            title_duplicate_threshold=float(os.getenv('TITLE_DUPLICATE_THRESHOLD', '0.85')),
            content_duplicate_threshold=float(os.getenv('CONTENT_DUPLICATE_THRESHOLD', '0.6')),
            classification_batch_size=int(os.getenv('CLASSIFICATION_BATCH_SIZE', '5')),
            classification_batch_delay=float(os.getenv('CLASSIFICATION_BATCH_DELAY', '1.0')),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            verbose_logging=os.getenv('VERBOSE_LOGGING', 'false').lower() == 'true'
        )

        config = Config(
            database=database_config,
            integrations=integration_config,
            app=app_config
        )

        self._validate_config(config)
        return config

    def _get_required_env(self, key: str) -> str:
        """Get required environment variable."""
        value = os.getenv(key)
        if not value:
            raise ConfigurationError(key, "required environment variable is not set")
        return value

    def _validate_config(self, config: Config) -> None:
        """Validate configuration values."""
        errors = []

        if not config.database.supabase_url.startswith('https://'):
            errors.append("SUPABASE_URL must start with https://")

        if not config.database.supabase_url.rstrip('/').endswith('.supabase.co'):
            errors.append("SUPABASE_URL must end with .supabase.co")

        for name, value in (
            ('TITLE_DUPLICATE_THRESHOLD', config.app.title_duplicate_threshold),
            ('CONTENT_DUPLICATE_THRESHOLD', config.app.content_duplicate_threshold),
        ):
            if value < 0 or value > 1:
                errors.append(f"{name} must be between 0 and 1")

        if config.app.feed_timeout < 1:
            errors.append("FEED_TIMEOUT must be at least 1 second")

        if config.app.max_concurrent_feeds < 1 or config.app.max_concurrent_feeds > 20:
            errors.append("MAX_CONCURRENT_FEEDS must be between 1 and 20")

        if config.app.existing_alerts_window_hours < 1:
            errors.append("EXISTING_ALERTS_WINDOW_HOURS must be at least 1")

        if config.app.classification_batch_size < 1:
            errors.append("CLASSIFICATION_BATCH_SIZE must be at least 1")

        if config.app.classification_batch_delay < 0:
            errors.append("CLASSIFICATION_BATCH_DELAY must not be negative")

        if config.integrations.push_provider not in ('supabase', 'firebase'):
            errors.append("PUSH_PROVIDER must be one of: supabase, firebase")

        valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if config.app.log_level not in valid_log_levels:
            errors.append(f"LOG_LEVEL must be one of: {', '.join(valid_log_levels)}")

        if errors:
            raise ConfigurationError('configuration', f"validation failed: {'; '.join(errors)}")

        logger.info("Configuration validation passed")

    def update_logging(self) -> None:
        """Configure logging based on current configuration."""
        config = self.get_config()

        numeric_level = getattr(logging, config.app.log_level)
        logging.getLogger().setLevel(numeric_level)

        if config.app.verbose_logging:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        else:
            format_str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

        for handler in logging.getLogger().handlers:
            handler.setLevel(numeric_level)
            formatter = logging.Formatter(format_str, datefmt='%Y-%m-%d %H:%M:%S')
            handler.setFormatter(formatter)

    def get_integration_status(self) -> Dict[str, bool]:
        """Get status of all integrations."""
        config = self.get_config()
        return {
            'openai': config.has_openai(),
            'push_supabase': config.integrations.push_provider == 'supabase',
            'push_firebase': bool(config.integrations.push_provider == 'firebase'
                                  and config.integrations.firebase_server_key)
        }


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def get_config() -> Config:
    """Get application configuration."""
    return get_config_manager().get_config()


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None
