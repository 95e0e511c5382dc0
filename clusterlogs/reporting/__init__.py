"""Rendering of collected logs and detected problems."""

from .console import Console, console
from .formatter import output_last_start, output_offline, output_problems

__all__ = ["Console", "console", "output_problems", "output_last_start", "output_offline"]
