"""
RU: Построение одномерных сеток модулей (EAN, UPC, Code39, Code128, ITF, Codabar, GS1-128).
EN: One-row module grids for 1D symbologies, sampled from reportlab barcode widgets.

Requirements: reportlab
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Final, Optional, Set, Tuple

from barcode_raster.model.enums import BarcodeType
from barcode_raster.model.symbol import BarcodeSymbol
from barcode_raster.rasterizer.exceptions import SymbolEncodeError

from .drawing import create_widget, widget_row

logger = logging.getLogger(__name__)

__all__ = [
    "LinearSymbolEncoder",
    "encode_linear",
    "gs1_check_digit",
    "DEFAULT_LINEAR_MARGIN",
    "WIDE_RATIO",
]

# EAN/UPC quiet zone; the EAN text positions assume it
DEFAULT_LINEAR_MARGIN: Final[int] = 10

# Wide element width in modules for two-width symbologies
WIDE_RATIO: Final[int] = 3

FNC1: Final[str] = "\xf1"

# (body digits, body digits + check digit)
_GTIN_LENGTHS: Final[Dict[BarcodeType, Tuple[int, int]]] = {
    BarcodeType.EAN8: (7, 8),
    BarcodeType.EAN13: (12, 13),
    BarcodeType.EAN14: (13, 14),
    BarcodeType.UPCA: (11, 12),
}

_CODE39_CHARS: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-.$/+% "
_CODABAR_CHARS: Final[str] = "0123456789-$:/.+ABCD"


def gs1_check_digit(body: str) -> str:
    """
    GS1 mod-10 check digit for a GTIN body (EAN-8, EAN-13, UPC-A, GTIN-14).

    Examples:
        >>> gs1_check_digit("590123412345")
        '7'
    """
    total = sum(int(d) * (3 if i % 2 == 0 else 1) for i, d in enumerate(reversed(body)))
    return str((10 - total % 10) % 10)


class LinearSymbolEncoder:
    """
    Build one-row module grids with reportlab barcode widgets.

    Args:
        barcode_type: 1D symbology.
        data: Payload string. GTIN symbologies accept the body with or without
            the check digit; a given check digit must be correct.
        margin: Quiet zone in modules.
        options: Extra reportlab widget attributes (e.g. ``checksum`` for Code39).

    Examples:
        >>> sym = LinearSymbolEncoder(BarcodeType.EAN13, "590123412345").encode()
        >>> sym.metadata.content
        '5901234123457'
        >>> sym.width
        95
    """

    # kind -> (reportlab widget name, widget attributes)
    _widget_support: Dict[BarcodeType, Tuple[str, Dict[str, Any]]] = {
        BarcodeType.EAN8: ("EAN8", {"quiet": 0, "humanReadable": 0}),
        BarcodeType.EAN13: ("EAN13", {"quiet": 0, "humanReadable": 0}),
        BarcodeType.UPCA: ("UPCA", {"quiet": 0, "humanReadable": 0}),
        # GTIN-14 is printed as ITF-14
        BarcodeType.EAN14: (
            "I2of5",
            {"quiet": 0, "humanReadable": 0, "checksum": 0, "bearers": 0, "ratio": WIDE_RATIO},
        ),
        BarcodeType.ITF: (
            "I2of5",
            {"quiet": 0, "humanReadable": 0, "checksum": 0, "bearers": 0, "ratio": WIDE_RATIO},
        ),
        BarcodeType.CODE39: (
            "Standard39",
            {"quiet": 0, "humanReadable": 0, "checksum": 0, "ratio": WIDE_RATIO},
        ),
        BarcodeType.CODE128: ("Code128", {"quiet": 0, "humanReadable": 0}),
        BarcodeType.GS1128: ("Code128", {"quiet": 0, "humanReadable": 0}),
        BarcodeType.CODABAR: (
            "Codabar",
            {"quiet": 0, "humanReadable": 0, "checksum": 0, "ratio": WIDE_RATIO},
        ),
    }

    def __init__(
        self,
        barcode_type: BarcodeType,
        data: str,
        margin: int = DEFAULT_LINEAR_MARGIN,
        options: Optional[Dict[str, Any]] = None,
    ) -> None:
        if not isinstance(barcode_type, BarcodeType):
            raise TypeError(
                f"barcode_type must be BarcodeType enum, got {type(barcode_type)!r}"
            )
        self.barcode_type = barcode_type
        self.data = data
        self.margin = margin
        self.options: Dict[str, Any] = dict(options) if options else {}

    def validate(self) -> None:
        """
        Validate data against the symbology rules before encoding.

        Raises:
            SymbolEncodeError: invalid data for the symbology.
        """
        if not isinstance(self.data, str) or not self.data.strip():
            raise SymbolEncodeError("Barcode data must be non-empty string")
        if self.margin < 0:
            raise SymbolEncodeError(f"Margin must be >= 0, got {self.margin}")
        ratio = self.options.get("ratio", WIDE_RATIO)
        if ratio not in (2, 3):
            raise SymbolEncodeError(f"ratio must be 2 or 3 modules, got {ratio!r}")

        bt = self.barcode_type
        if bt in _GTIN_LENGTHS:
            if not self.data.isdigit():
                raise SymbolEncodeError(f"{bt.name} barcode requires digits only.")
            short, full = _GTIN_LENGTHS[bt]
            if len(self.data) not in (short, full):
                raise SymbolEncodeError(f"{bt.name} must be {short} or {full} digits.")
            if len(self.data) == full and gs1_check_digit(self.data[:-1]) != self.data[-1]:
                raise SymbolEncodeError(
                    f"{bt.name} check digit mismatch: expected "
                    f"{gs1_check_digit(self.data[:-1])}, got {self.data[-1]}"
                )

        elif bt == BarcodeType.CODE39:
            if any(c.islower() for c in self.data):
                raise SymbolEncodeError(
                    "CODE39 supports only uppercase A-Z, 0-9, and -.$/+% chars"
                )
            if not all(c in _CODE39_CHARS for c in self.data):
                raise SymbolEncodeError("CODE39 supports only A-Z, 0-9, and -.$/+% chars")

        elif bt in (BarcodeType.CODE128, BarcodeType.GS1128):
            if len(self.data) > 80:
                raise SymbolEncodeError(f"{bt.name} data too long (max ~80)")
            if any(ord(c) > 127 for c in self.data):
                raise SymbolEncodeError(f"{bt.name} supports only ASCII data")

        elif bt == BarcodeType.ITF and (not self.data.isdigit() or len(self.data) % 2 != 0):
            raise SymbolEncodeError("ITF must be even number of digits.")

        elif bt == BarcodeType.CODABAR:
            upper = self.data.upper()
            if not all(c in _CODABAR_CHARS for c in upper):
                raise SymbolEncodeError(
                    "Codabar supports only 0-9, -$:/.+, and start/stop chars A-D"
                )
            if any(c in "ABCD" for c in upper[1:-1]):
                raise SymbolEncodeError("Codabar start/stop chars A-D are allowed only at the ends")

    def get_content(self) -> str:
        """Human-readable content; GTIN symbologies always carry their check digit."""
        lengths = _GTIN_LENGTHS.get(self.barcode_type)
        if lengths is not None and len(self.data) == lengths[0]:
            return self.data + gs1_check_digit(self.data)
        if self.barcode_type == BarcodeType.CODABAR:
            return self.data.upper()
        return self.data

    def get_payload(self) -> str:
        """Value handed to the reportlab widget."""
        content = self.get_content()
        bt = self.barcode_type
        if bt in (BarcodeType.EAN8, BarcodeType.EAN13, BarcodeType.UPCA):
            # the widget appends the check digit itself
            return content[:-1]
        if bt == BarcodeType.GS1128:
            return FNC1 + content
        return content

    def encode(self) -> BarcodeSymbol:
        """
        Encode the payload into a one-row BarcodeSymbol.

        Raises:
            SymbolEncodeError: validation or encoding failed.
        """
        self.validate()
        code_name, attrs = self._widget_support[self.barcode_type]
        widget = create_widget(code_name, self.get_payload(), **{**attrs, **self.options})
        row = widget_row(widget, code_name)
        content = self.get_content()
        logger.debug(
            "Encoded %s %r -> %d modules", self.barcode_type.name, content, len(row)
        )
        return BarcodeSymbol.from_rows(
            [row], kind=self.barcode_type, content=content, margin=self.margin
        )

    @classmethod
    def supported_types(cls) -> Set[BarcodeType]:
        return set(cls._widget_support.keys())

    @classmethod
    def widget_name_map(cls) -> Dict[BarcodeType, str]:
        return {bt: name for bt, (name, _) in cls._widget_support.items()}


def encode_linear(
    barcode_type: BarcodeType,
    data: str,
    margin: int = DEFAULT_LINEAR_MARGIN,
    **options: Any,
) -> BarcodeSymbol:
    """Shortcut for ``LinearSymbolEncoder(barcode_type, data, margin, options).encode()``."""
    return LinearSymbolEncoder(barcode_type, data, margin, options).encode()
