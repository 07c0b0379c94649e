"""Asset management for Arcade Shooter."""

from __future__ import annotations

from .loader import AssetLoader, natural_sort_key
from .placeholder_generator import PlaceholderGenerator, generate_placeholders

__all__ = [
    "AssetLoader",
    "natural_sort_key",
    "PlaceholderGenerator",
    "generate_placeholders",
]
