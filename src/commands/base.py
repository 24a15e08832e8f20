#!/usr/bin/env python3
"""
Base command class for the modular command architecture.

Provides common functionality and interface that all commands inherit.
Uses dependency injection for better testability and maintainability.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, List
from argparse import Namespace
from core.container import get_container
from core.exceptions import AlertPipelineError, ConfigurationError

logger = logging.getLogger(__name__)


class BaseCommand(ABC):
    """
    Base class for all command endpoints.

    Services are resolved lazily from the dependency injection container, so
    commands that only use the pure location and dedup core never need
    database credentials.
    """

    def __init__(self, container=None):
        """
        Initialize base command with dependency injection container.

        Args:
            container: Optional container instance. If None, uses global container.
        """
        self.logger = logging.getLogger(self.__class__.__name__)
        self._container = container or get_container()

    @property
    def config(self):
        """Get configuration from container."""
        return self._container.get('config')

    @property
    def alert_store(self):
        """Get alert store from container."""
        return self._container.get('alert_store')

    @property
    def location_matcher(self):
        """Get location matcher from container."""
        return self._container.get('location_matcher')

    def create_pipeline(self):
        """Create a processing pipeline wired from configuration."""
        return self._container.get('pipeline')

    def print_json(self, data: Any) -> None:
        """Print data as indented JSON, keeping Hebrew readable."""
        print(json.dumps(data, ensure_ascii=False, indent=2))

    @abstractmethod
    def execute(self, subcommand: str, args: Namespace) -> int:
        """
        Execute the command with given subcommand and arguments.

        Args:
            subcommand: The specific action to perform
            args: Parsed command line arguments

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        pass

    def get_available_subcommands(self) -> List[str]:
        """
        Get list of available subcommands for this command.

        Returns:
            List of subcommand names
        """
        methods = []
        for attr_name in dir(self):
            if attr_name.startswith('_') or attr_name in dir(BaseCommand):
                continue
            if not callable(getattr(self, attr_name)):
                continue
            methods.append(attr_name)
        return methods

    def unknown_subcommand(self, subcommand: str) -> int:
        available = ", ".join(self.get_available_subcommands())
        self.logger.error(f"Unknown subcommand '{subcommand}'. Available: {available}")
        return 1

    def handle_error(self, error: Exception, context: str = "") -> int:
        """
        Standard error handling for commands.

        Args:
            error: The exception that occurred
            context: Additional context about where the error occurred

        Returns:
            Appropriate exit code
        """
        error_msg = f"{context}: {error}" if context else str(error)

        if isinstance(error, KeyboardInterrupt):
            self.logger.info("Command interrupted by user")
            return 130

        if isinstance(error, AlertPipelineError):
            self.logger.error(error_msg, extra={'error': error.to_dict()})
        else:
            self.logger.error(error_msg, exc_info=True)

        # Map common exceptions to exit codes
        if isinstance(error, (ConfigurationError, ValueError)):
            return 22
        elif isinstance(error, FileNotFoundError):
            return 2
        elif isinstance(error, PermissionError):
            return 13
        else:
            return 1
