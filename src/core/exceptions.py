#!/usr/bin/env python3
"""
Standardized exception hierarchy for the alert pipeline.

The pure matching and deduplication core never raises; these exceptions
belong to the I/O glue around it (feeds, storage, classification, push).
"""

from typing import Optional, Dict, Any


class AlertPipelineError(Exception):
    """Base exception for all alert pipeline errors."""

    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            error_code: Machine-readable error code
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            'error_type': self.__class__.__name__,
            'error_code': self.error_code,
            'message': self.message,
            'context': self.context
        }


# Source-related exceptions
class SourceError(AlertPipelineError):
    """Base exception for RSS source errors."""
    pass


class SourceConnectionError(SourceError):
    """Failed to fetch an RSS source."""

    def __init__(self, source_name: str, url: str, original_error: Exception):
        message = f"Failed to connect to {source_name} at {url}"
        context = {
            'source_name': source_name,
            'url': url,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class SourceParseError(SourceError):
    """Failed to parse content from an RSS source."""

    def __init__(self, source_name: str, parse_stage: str, original_error: Exception):
        message = f"Failed to parse {parse_stage} from {source_name}"
        context = {
            'source_name': source_name,
            'parse_stage': parse_stage,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Database-related exceptions
class DatabaseError(AlertPipelineError):
    """Base exception for database errors."""
    pass


class DatabaseOperationError(DatabaseError):
    """Database operation failed."""

    def __init__(self, operation: str, table: str, original_error: Exception):
        message = f"Database {operation} failed on table {table}: {original_error}"
        context = {
            'operation': operation,
            'table': table,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Classification-related exceptions
class ClassificationError(AlertPipelineError):
    """Base exception for classification errors."""
    pass


class LLMError(ClassificationError):
    """LLM/AI classification error."""

    def __init__(self, provider: str, model: str, original_error: Exception):
        message = f"LLM error from {provider} ({model}): {original_error}"
        context = {
            'provider': provider,
            'model': model,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


class ClassificationParseError(ClassificationError):
    """LLM response could not be parsed into a classification."""

    def __init__(self, raw_response: str, original_error: Exception):
        message = f"Could not parse classification response: {original_error}"
        context = {
            'raw_response': raw_response[:500] if raw_response else raw_response,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Notification-related exceptions
class NotificationError(AlertPipelineError):
    """Base exception for notification errors."""
    pass


class NotificationChannelError(NotificationError):
    """Notification channel unavailable or failed."""

    def __init__(self, channel: str, operation: str, original_error: Exception):
        message = f"Notification {operation} failed for channel {channel}"
        context = {
            'channel': channel,
            'operation': operation,
            'original_error': str(original_error)
        }
        super().__init__(message, context=context)


# Configuration-related exceptions
class ConfigurationError(AlertPipelineError, ValueError):
    """Configuration is invalid or missing."""

    def __init__(self, config_key: str, issue: str):
        message = f"Configuration error for {config_key}: {issue}"
        context = {
            'config_key': config_key,
            'issue': issue
        }
        super().__init__(message, context=context)


# Recovery utilities
class ErrorRecovery:
    """Utilities for error recovery decisions."""

    @staticmethod
    def should_fallback(error: Exception) -> bool:
        """Check if classification should fall back to keywords."""
        return isinstance(error, ClassificationError)
