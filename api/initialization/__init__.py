"""Process initialization helpers."""

from api.initialization.logging import setup_logging


__all__ = ["setup_logging"]
