"""Package initializer for the backend `telcogrid` package.
Re-exports the factory and extensions defined in `init.py`.
"""
from .init import (
    create_app,
    db,
    migrate,
    jwt,
    limiter,
    metrics,
)

__all__ = [
    "create_app",
    "db",
    "migrate",
    "jwt",
    "limiter",
    "metrics",
]
