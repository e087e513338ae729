"""
RU: Построение 2D-сеток модулей (QR, DataMatrix) с поддержкой GS1-префикса.
EN: 2D module grids (QR via qrcode, ECC200 DataMatrix via reportlab) with GS1 prefix support.

Requirements: qrcode, reportlab
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, List, Optional, Sequence, Set, Union

import qrcode
from qrcode.constants import (
    ERROR_CORRECT_H,
    ERROR_CORRECT_L,
    ERROR_CORRECT_M,
    ERROR_CORRECT_Q,
)
from qrcode.exceptions import DataOverflowError

from barcode_raster.model.enums import Matrix2DCodeType
from barcode_raster.model.symbol import BarcodeSymbol
from barcode_raster.rasterizer.exceptions import SymbolEncodeError

from .drawing import create_widget, widget_rows

logger = logging.getLogger(__name__)

__all__ = [
    "MatrixSymbolEncoder",
    "encode_matrix",
    "DEFAULT_MATRIX_MARGIN",
    "DATAMATRIX_SIZE",
]

DEFAULT_MATRIX_MARGIN: Final[int] = 4  # QR quiet zone
DATAMATRIX_SIZE: Final[int] = 44  # reportlab encodes a fixed 44x44 C40 symbol
DATAMATRIX_WIDGET: Final[str] = "ECC200DataMatrix"

_QR_ERROR_LEVELS: Final[Dict[str, int]] = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


class MatrixSymbolEncoder:
    """2D module-grid builder for QR and DataMatrix.

    Args:
        barcode_type: 2D symbology.
        data: Source data to encode.
        margin: Quiet zone in modules.
        options: Per-type options:
            QR: ``version``, ``error_correction`` ("L"/"M"/"Q"/"H" or qrcode constant).
            DataMatrix: none.
        gs1_mode: Enable GS1 prefix preprocessing.

    Examples:
        >>> sym = MatrixSymbolEncoder(Matrix2DCodeType.QR, "test123").encode()
        >>> sym.width == sym.height
        True
    """

    _qr_types: Set[Matrix2DCodeType] = {Matrix2DCodeType.QR}
    _datamatrix_types: Set[Matrix2DCodeType] = {Matrix2DCodeType.DATAMATRIX}

    def __init__(
        self,
        barcode_type: Matrix2DCodeType,
        data: str,
        margin: int = DEFAULT_MATRIX_MARGIN,
        options: Optional[Dict[str, Any]] = None,
        gs1_mode: bool = False,
    ) -> None:
        if not isinstance(barcode_type, Matrix2DCodeType):
            logger.error(
                "barcode_type must be Matrix2DCodeType, got %r", type(barcode_type)
            )
            raise TypeError("barcode_type must be Matrix2DCodeType")
        self.barcode_type = barcode_type
        self.data = data
        self.margin = margin
        self.options = options or {}
        self.gs1_mode = gs1_mode

    def validate(self) -> None:
        """Validate data and barcode type.

        Raises:
            SymbolEncodeError: For empty data, negative margin or unsupported type.
        """
        if not isinstance(self.data, str) or not self.data.strip():
            logger.error("Input data is empty or not string, got %r", self.data)
            raise SymbolEncodeError("Data must be a non-empty string")
        if self.margin < 0:
            raise SymbolEncodeError(f"Margin must be >= 0, got {self.margin}")
        if self.barcode_type not in self.all_supported_types():
            raise SymbolEncodeError(
                f"Barcode type {self.barcode_type!r} not supported for 2D generation"
            )
        if self.barcode_type in self._datamatrix_types:
            if any(ord(c) > 255 for c in self.data):
                raise SymbolEncodeError("DataMatrix supports only Latin-1 characters")
            if self.options:
                raise SymbolEncodeError(
                    f"DataMatrix takes no options, got {sorted(self.options)}"
                )

    def get_payload(self) -> str:
        """Return data with GS1 prefixes as needed for barcode type."""
        if self.gs1_mode:
            if self.barcode_type in self._qr_types:
                if not self.data.startswith("]C1"):
                    return "]C1" + self.data
            elif self.barcode_type in self._datamatrix_types:
                if not self.data.startswith("\x1d"):
                    return "\x1d" + self.data
        return self.data

    def encode(self) -> BarcodeSymbol:
        """
        Encode the payload into a BarcodeSymbol.

        Raises:
            SymbolEncodeError: invalid input or encoder failure.
        """
        self.validate()
        payload = self.get_payload()
        if self.barcode_type in self._qr_types:
            rows = self._qr_rows(payload)
        else:
            rows = self._datamatrix_rows(payload)
        symbol = BarcodeSymbol.from_rows(
            rows, kind=self.barcode_type, content=self.data, margin=self.margin
        )
        logger.info(
            "2D grid generated: %s %dx%d modules, %d chars",
            self.barcode_type.name,
            symbol.width,
            symbol.height,
            len(payload),
        )
        return symbol

    def _qr_rows(self, payload: str) -> List[Sequence[bool]]:
        level: Union[str, int] = self.options.get("error_correction", "M")
        if isinstance(level, str):
            if level.upper() not in _QR_ERROR_LEVELS:
                raise SymbolEncodeError(f"Unknown QR error correction level {level!r}")
            level = _QR_ERROR_LEVELS[level.upper()]
        try:
            qr = qrcode.QRCode(
                version=self.options.get("version"),
                error_correction=level,
                border=0,
            )
            qr.add_data(payload)
            qr.make(fit=True)
            return [list(row) for row in qr.get_matrix()]
        except (DataOverflowError, ValueError) as e:
            logger.error("QR generation error: %r", e)
            raise SymbolEncodeError(f"QR generation failed: {e}") from e

    def _datamatrix_rows(self, payload: str) -> List[Sequence[bool]]:
        widget = create_widget(DATAMATRIX_WIDGET, payload)
        rows: List[Sequence[bool]] = list(widget_rows(widget, DATAMATRIX_WIDGET))
        if len(rows) != DATAMATRIX_SIZE or any(len(r) != DATAMATRIX_SIZE for r in rows):
            # an all-white edge column or row would shrink the sampled grid
            raise SymbolEncodeError(
                f"DataMatrix grid is {len(rows)} rows, expected {DATAMATRIX_SIZE}"
            )
        return rows

    @classmethod
    def all_supported_types(cls) -> Set[Matrix2DCodeType]:
        """Get all supported 2D barcode types."""
        return cls._qr_types | cls._datamatrix_types


def encode_matrix(
    barcode_type: Matrix2DCodeType,
    data: str,
    margin: int = DEFAULT_MATRIX_MARGIN,
    gs1_mode: bool = False,
    **options: Any,
) -> BarcodeSymbol:
    """Shortcut for ``MatrixSymbolEncoder(...).encode()``."""
    return MatrixSymbolEncoder(barcode_type, data, margin, options, gs1_mode).encode()
