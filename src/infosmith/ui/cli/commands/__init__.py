"""CLI command implementations."""

from .render import render


__all__ = ["render"]
