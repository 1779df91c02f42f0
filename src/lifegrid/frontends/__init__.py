"""Frontend interfaces that drive the simulation."""

from .cli import CLIGameOfLife

__all__ = ["CLIGameOfLife"]
