"""Web adapter package: exposes the control surface over HTTP."""

from typing import Any, Dict, Optional

from flask import Flask

from transync.config import load_config


def create_app(config: Optional[Dict[str, Any]] = None, transport=None) -> Flask:
    """Application factory for the web interface."""
    if config is None:
        config = load_config()

    from .app import build_app  # Import here to avoid circular imports

    return build_app(config, transport=transport)


__all__ = ["create_app"]
