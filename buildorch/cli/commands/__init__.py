"""CLI command handlers."""

from .build import run_build
from .properties import show_properties

__all__ = ['run_build', 'show_properties']
