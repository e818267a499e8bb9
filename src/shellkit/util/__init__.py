"""Utility helpers package."""

from shellkit.util.logging import get_logger

__all__ = ["get_logger"]
