"""Composition engine for ListingPack."""

from .crop import auto_adjust_crop, auto_adjust_edit_state, default_crop
from .engine import CompositionEngine

__all__ = ["CompositionEngine", "auto_adjust_crop", "auto_adjust_edit_state", "default_crop"]
