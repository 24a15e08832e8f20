#!/usr/bin/env python3
"""
Dependency Injection Container

Provides a centralized way to manage dependencies and avoid scattered
instantiation throughout the codebase. Supports singleton and factory patterns.
"""

import logging
from typing import Any, Dict, Callable, TypeVar, Optional
from functools import wraps
import threading

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Container:
    """Simple dependency injection container with lifecycle management."""
    
    def __init__(self):
        """Initialize empty container."""
        self._factories: Dict[str, Callable] = {}
        self._singletons: Dict[str, Any] = {}
        self._lock = threading.RLock()
        
    def register_singleton(self, service_name: str, factory: Callable[[], T]) -> None:
        """
        Register a service as singleton (created once, reused).
        
        Args:
            service_name: Unique name for the service
            factory: Function that creates the service instance
        """
        with self._lock:
            self._factories[service_name] = factory
            # Remove any existing instance to force recreation
            if service_name in self._singletons:
                del self._singletons[service_name]
    
    def register_factory(self, service_name: str, factory: Callable[[], T]) -> None:
        """
        Register a service as factory (new instance each time).
        
        Args:
            service_name: Unique name for the service
            factory: Function that creates service instances
        """
        with self._lock:
            self._factories[service_name] = factory
    
    def register_instance(self, service_name: str, instance: T) -> None:
        """
        Register an existing instance as singleton.
        
        Args:
            service_name: Unique name for the service
            instance: Pre-created service instance
        """
        with self._lock:
            self._singletons[service_name] = instance
    
    def get(self, service_name: str) -> Any:
        """
        Get service instance by name.
        
        Args:
            service_name: Name of the service to retrieve
            
        Returns:
            Service instance
            
        Raises:
            KeyError: If service is not registered
        """
        # Check for existing singleton first
        if service_name in self._singletons:
            return self._singletons[service_name]
            
        # Check if factory is registered
        if service_name not in self._factories:
            raise KeyError(f"Service '{service_name}' not registered")
        
        with self._lock:
            factory = self._factories[service_name]
            
            # Check if it should be singleton
            if hasattr(factory, '_is_singleton') and factory._is_singleton:
                # Double-check pattern for thread safety
                if service_name not in self._singletons:
                    instance = factory()
                    self._singletons[service_name] = instance
                    logger.debug(f"Created singleton instance for '{service_name}'")
                return self._singletons[service_name]
            else:
                # Factory - create new instance each time
                instance = factory()
                logger.debug(f"Created new instance for '{service_name}'")
                return instance
    
    def has(self, service_name: str) -> bool:
        """Check if service is registered."""
        return service_name in self._factories or service_name in self._singletons
    
    def clear(self) -> None:
        """Clear all registered services and instances."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
    


def singleton(factory_func: Callable[[], T]) -> Callable[[], T]:
    """
    Decorator to mark a factory function as singleton.
    
    Usage:
        @singleton  
        def create_alert_store():
            return SupabaseAlertStore()
    """
    @wraps(factory_func)
    def wrapper():
        return factory_func()
    
    wrapper._is_singleton = True
    return wrapper


# Global container instance
_container: Optional[Container] = None
_container_lock = threading.Lock()


def get_container() -> Container:
    """Get global container instance (thread-safe singleton)."""
    global _container
    if _container is None:
        with _container_lock:
            if _container is None:
                _container = Container()
                _setup_default_services(_container)
    return _container


def reset_container() -> None:
    """Reset global container (useful for testing)."""
    global _container
    with _container_lock:
        if _container:
            _container.clear()
        _container = None


def _setup_default_services(container: Container) -> None:
    """Set up default service registrations with configuration injection."""

    @singleton
    def create_config():
        from core.config import get_config_manager
        manager = get_config_manager()
        manager.update_logging()
        return manager.get_config()

    @singleton
    def create_alert_store():
        from core.supabase_adapter import SupabaseAlertStore
        config = container.get('config')
        return SupabaseAlertStore(
            alerts_table=config.database.alerts_table,
            profiles_table=config.database.profiles_table,
            sources_table=config.database.sources_table
        )

    @singleton
    def create_feed_parser():
        from core.feed_parser import FeedParser
        config = container.get('config')
        return FeedParser(timeout=config.app.feed_timeout, user_agent=config.app.feed_user_agent)

    def create_async_fetcher():
        from functools import partial
        from core.async_feed_parser import fetch_feeds_sync
        config = container.get('config')
        return partial(
            fetch_feeds_sync,
            timeout=config.app.feed_timeout,
            max_concurrent=config.app.max_concurrent_feeds,
            user_agent=config.app.feed_user_agent
        )

    @singleton
    def create_location_matcher():
        from core.location import LocationMatcher
        return LocationMatcher()

    def create_deduplicator():
        from core.deduplication import AlertDeduplicator
        config = container.get('config')
        return AlertDeduplicator(
            title_threshold=config.app.title_duplicate_threshold,
            content_threshold=config.app.content_duplicate_threshold
        )

    def create_openai_client():
        from integrations.openai_client import OpenAIClient
        from core.exceptions import ConfigurationError
        config = container.get('config')
        if not config.has_openai():
            raise ConfigurationError('OPENAI_API_KEY', "OpenAI API key not configured")
        return OpenAIClient(api_key=config.integrations.openai_api_key,
                            model=config.integrations.openai_model)

    def create_classifier():
        from core.classification import AlertClassifier
        config = container.get('config')
        ai_client = container.get('openai_client') if config.has_openai() else None
        if ai_client is None:
            logger.warning("OpenAI not configured, classifying with keywords only")
        return AlertClassifier(
            ai_client=ai_client,
            batch_size=config.app.classification_batch_size,
            batch_delay=config.app.classification_batch_delay
        )

    @singleton
    def create_push_notifier():
        from integrations.push_notifier import PushNotifier
        config = container.get('config')
        return PushNotifier(
            provider=config.integrations.push_provider,
            supabase_url=config.database.supabase_url,
            service_key=config.database.supabase_service_key,
            firebase_server_key=config.integrations.firebase_server_key
        )

    def create_dispatcher():
        from core.notifications import AlertNotificationDispatcher
        return AlertNotificationDispatcher(container.get('push_notifier'),
                                           container.get('location_matcher'))

    def create_pipeline():
        from core.pipeline import AlertProcessingPipeline
        config = container.get('config')
        return AlertProcessingPipeline(
            store=container.get('alert_store'),
            feed_parser=container.get('feed_parser'),
            classifier=container.get('classifier'),
            deduplicator=container.get('deduplicator'),
            dispatcher=container.get('dispatcher'),
            existing_window_hours=config.app.existing_alerts_window_hours,
            async_fetcher=container.get('async_fetcher')
        )

    # Register services
    container.register_singleton('config', create_config)
    container.register_singleton('alert_store', create_alert_store)
    container.register_singleton('feed_parser', create_feed_parser)
    container.register_singleton('location_matcher', create_location_matcher)
    container.register_singleton('push_notifier', create_push_notifier)

    # Non-singletons
    container.register_factory('async_fetcher', create_async_fetcher)
    container.register_factory('deduplicator', create_deduplicator)
    container.register_factory('openai_client', create_openai_client)
    container.register_factory('classifier', create_classifier)
    container.register_factory('dispatcher', create_dispatcher)
    container.register_factory('pipeline', create_pipeline)

    logger.debug("Default services registered in container")

