"""Route blueprints for the web application."""

from .control import control_bp

__all__ = [
    "control_bp",
]
