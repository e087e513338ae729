"""
model

Domain types shared by the rasterizer and the grid sources.
"""

from .enums import (
    DEFAULT_IMAGE_FORMAT,
    EAN_TYPES,
    BarcodeType,
    FontStyle,
    ImageFormat,
    Matrix2DCodeType,
    SymbologyKind,
    parse_kind,
)
from .symbol import Barcode, BarcodeMetadata, BarcodeSymbol, ModuleGrid

__all__ = [
    "BarcodeType",
    "Matrix2DCodeType",
    "ImageFormat",
    "FontStyle",
    "SymbologyKind",
    "EAN_TYPES",
    "DEFAULT_IMAGE_FORMAT",
    "parse_kind",
    "ModuleGrid",
    "Barcode",
    "BarcodeMetadata",
    "BarcodeSymbol",
]
