"""
Archiver Registry for Recast

Factory pattern with decorator-based registration.

Usage:
    # In archiver implementation:
    @register_archiver("zip")
    class ZipArchiverFactory:
        @staticmethod
        def create(config: dict) -> Archiver:
            return ZipArchiver(config)

    # To get an archiver:
    archiver = get_archiver("zip", config)
"""

from typing import Dict, Callable
from .base import Archiver

# Global registry of archiver factories
ARCHIVER_REGISTRY: Dict[str, Callable[[dict], Archiver]] = {}


def register_archiver(name: str):
    """
    Decorator to register archiver factories.

    Args:
        name: Unique identifier for this archiver

    Returns:
        Decorator function that registers the factory class
    """
    def decorator(factory_class):
        ARCHIVER_REGISTRY[name] = factory_class.create
        return factory_class
    return decorator


def get_archiver(name: str, config: dict) -> Archiver:
    """
    Get an archiver instance by name.

    Args:
        name: Archiver identifier (must be registered)
        config: Archiver-specific configuration dictionary

    Returns:
        Initialized archiver instance

    Raises:
        ValueError: If archiver name is not registered
    """
    if name not in ARCHIVER_REGISTRY:
        available = ', '.join(ARCHIVER_REGISTRY.keys()) if ARCHIVER_REGISTRY else 'none'
        raise ValueError(
            f"Unknown archiver: '{name}'. "
            f"Available archivers: {available}"
        )
    return ARCHIVER_REGISTRY[name](config)


# Import shipped archivers to trigger registration
from . import zip_archiver  # noqa: E402,F401
