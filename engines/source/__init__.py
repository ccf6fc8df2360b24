"""
Source Provider Registry for Recast

Factory pattern with decorator-based registration.

Usage:
    # In source implementation:
    @register_source("filesystem")
    class FilesystemSourceFactory:
        @staticmethod
        def create(config: dict) -> SourceProvider:
            return FilesystemSource(config)

    # To get a source:
    source = get_source("filesystem", config)
"""

from typing import Dict, Callable
from .base import SourceProvider

# Global registry of source provider factories
SOURCE_REGISTRY: Dict[str, Callable[[dict], SourceProvider]] = {}


def register_source(name: str):
    """
    Decorator to register source provider factories.

    Args:
        name: Unique identifier for this source

    Returns:
        Decorator function that registers the factory class
    """
    def decorator(factory_class):
        SOURCE_REGISTRY[name] = factory_class.create
        return factory_class
    return decorator


def get_source(name: str, config: dict) -> SourceProvider:
    """
    Get a source provider instance by name.

    Args:
        name: Source identifier (must be registered)
        config: Source-specific configuration dictionary

    Returns:
        Initialized source provider instance

    Raises:
        ValueError: If source name is not registered
    """
    if name not in SOURCE_REGISTRY:
        available = ', '.join(SOURCE_REGISTRY.keys()) if SOURCE_REGISTRY else 'none'
        raise ValueError(
            f"Unknown source: '{name}'. "
            f"Available sources: {available}"
        )
    return SOURCE_REGISTRY[name](config)


# Import shipped sources to trigger registration
from . import filesystem  # noqa: E402,F401
