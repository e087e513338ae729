"""
sources

Источники сеток модулей: обёртки над внешними кодировщиками штрихкодов.

- 1D: reportlab (EAN, UPC, Code39, Code128, ITF, Codabar, GS1-128)
- 2D: qrcode (QR), reportlab (ECC200 DataMatrix)

Public API:
    - encode_symbol: выбор кодировщика по типу символики (function)
    - supported_kinds / supported_matrix: манифест поддерживаемых типов
    - LinearSymbolEncoder / encode_linear
    - MatrixSymbolEncoder / encode_matrix

Примеры:
    >>> from barcode_raster.sources import encode_symbol
    >>> sym = encode_symbol("ean13", "590123412345")
    >>> sym2d = encode_symbol(Matrix2DCodeType.QR, "test123", error_correction="H")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Set, Union

from barcode_raster.model.enums import (
    BarcodeType,
    Matrix2DCodeType,
    SymbologyKind,
    parse_kind,
)
from barcode_raster.model.symbol import BarcodeSymbol
from barcode_raster.rasterizer.exceptions import SymbolEncodeError
from barcode_raster.sources.linear import (
    DEFAULT_LINEAR_MARGIN,
    LinearSymbolEncoder,
    encode_linear,
)
from barcode_raster.sources.matrix import (
    DEFAULT_MATRIX_MARGIN,
    MatrixSymbolEncoder,
    encode_matrix,
)

logger = logging.getLogger(__name__)

# Central manifest: shape, encoder and supported kinds
_ENCODER_MANIFEST: Dict[str, Dict[str, Any]] = {
    "1d": {
        "types": LinearSymbolEncoder.supported_types(),
        "encoder": LinearSymbolEncoder,
        "default_margin": DEFAULT_LINEAR_MARGIN,
    },
    "2d": {
        "types": MatrixSymbolEncoder.all_supported_types(),
        "encoder": MatrixSymbolEncoder,
        "default_margin": DEFAULT_MATRIX_MARGIN,
    },
}


def supported_kinds() -> Set[SymbologyKind]:
    kinds: Set[SymbologyKind] = set()
    for entry in _ENCODER_MANIFEST.values():
        kinds |= entry["types"]
    return kinds


def supported_matrix() -> Dict[str, Dict[str, Any]]:
    """
    For each supported kind: its shape layer, encoder class and default margin.
    Used for API listings.
    """
    result: Dict[str, Dict[str, Any]] = {}
    for key, entry in _ENCODER_MANIFEST.items():
        for kind in entry["types"]:
            result[kind.value] = {
                "layer": key,
                "encoder": entry["encoder"],
                "default_margin": entry["default_margin"],
            }
    return result


def encode_symbol(
    kind: Union[str, SymbologyKind],
    data: str,
    **options: Any,
) -> BarcodeSymbol:
    """
    Encode ``data`` with the encoder registered for ``kind``.

    Keyword options ``margin`` and (2D only) ``gs1_mode`` are taken out; the
    rest is passed to the encoder.

    Raises:
        SymbolEncodeError: unknown kind or encoding failure.
    """
    try:
        resolved = parse_kind(kind)
    except ValueError as e:
        raise SymbolEncodeError(str(e)) from e

    entry = supported_matrix().get(resolved.value)
    if entry is None:
        raise SymbolEncodeError(f"No encoder available for {resolved.name}")
    margin = options.pop("margin", entry["default_margin"])
    logger.debug("Encoding %s via %s layer", resolved.name, entry["layer"])

    if isinstance(resolved, BarcodeType):
        return LinearSymbolEncoder(resolved, data, margin, options).encode()
    elif isinstance(resolved, Matrix2DCodeType):
        gs1_mode = bool(options.pop("gs1_mode", False))
        return MatrixSymbolEncoder(resolved, data, margin, options, gs1_mode).encode()
    else:
        raise SymbolEncodeError(f"Unsupported symbology kind {resolved!r}")


__all__ = [
    "encode_symbol",
    "supported_kinds",
    "supported_matrix",
    "LinearSymbolEncoder",
    "MatrixSymbolEncoder",
    "encode_linear",
    "encode_matrix",
    "DEFAULT_LINEAR_MARGIN",
    "DEFAULT_MATRIX_MARGIN",
]
