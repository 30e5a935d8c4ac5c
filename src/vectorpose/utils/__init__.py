"""
Utility functions for vectorpose
"""

from .colors import (
    hex_to_rgb,
    rgb_to_hex,
    normalize_color,
)

__all__ = [
    'hex_to_rgb',
    'rgb_to_hex',
    'normalize_color',
]
