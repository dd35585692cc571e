"""
Local package for Kubernix.

This package holds the runtime configuration, the process supervisor and the
launchers of the individual cluster components.
"""

from .config import Config

__all__ = ["Config"]
