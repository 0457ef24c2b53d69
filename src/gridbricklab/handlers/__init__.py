"""
Built-in record handlers for GridBrickLab.
"""

from .registry import default_registry, register_defaults

__all__ = ["default_registry", "register_defaults"]
