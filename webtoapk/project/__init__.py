"""Native project creation."""

from .initializer import ProjectInitializer, create_project_initializer


__all__ = ["ProjectInitializer", "create_project_initializer"]
