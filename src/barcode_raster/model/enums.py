"""
model/enums.py

RU: Перечисления символик штрихкодов и параметров вывода растеризатора.
EN: Symbology tags, output image formats and font styles used by the rasterizer.

- BarcodeType: 1D symbologies (one module row).
- Matrix2DCodeType: 2D symbologies (several module rows).
- ImageFormat: container formats the encoder layer can produce.
- FontStyle: styles accepted by font providers.
"""

from __future__ import annotations

from enum import Enum
from typing import Final, FrozenSet, Literal, Union


class BarcodeType(str, Enum):
    EAN8 = "ean8"
    EAN13 = "ean13"
    EAN14 = "ean14"  # GTIN-14 shipping containers
    UPCA = "upca"
    CODE39 = "code39"
    CODE128 = "code128"
    ITF = "itf"
    CODABAR = "codabar"
    GS1128 = "gs1128"  # GS1-128, Code128 with FNC1

    @property
    def is_ean(self) -> bool:
        return self in EAN_TYPES

    def localized_name(self, lang: Literal["ru", "en"] = "en") -> str:
        names_ru = {
            BarcodeType.EAN14: "EAN-14 (короб)",
            BarcodeType.ITF: "Interleaved 2 of 5",
            BarcodeType.GS1128: "GS1-128 (EAN-128)",
        }
        names_en = {
            BarcodeType.EAN8: "EAN-8",
            BarcodeType.EAN13: "EAN-13",
            BarcodeType.EAN14: "EAN-14",
            BarcodeType.UPCA: "UPC-A",
            BarcodeType.CODE39: "Code 39",
            BarcodeType.CODE128: "Code 128",
            BarcodeType.ITF: "Interleaved 2 of 5",
            BarcodeType.CODABAR: "Codabar",
            BarcodeType.GS1128: "GS1-128",
        }
        if lang == "ru":
            return names_ru.get(self, names_en[self])
        return names_en[self]


class Matrix2DCodeType(str, Enum):
    QR = "qr"
    DATAMATRIX = "datamatrix"

    def localized_name(self, lang: str = "en") -> str:
        names = {
            "qr": {"ru": "QR код", "en": "QR code"},
            "datamatrix": {"ru": "DataMatrix код", "en": "DataMatrix"},
        }
        return names[self.value].get(lang, self.value)


class ImageFormat(str, Enum):
    PNG = "png"
    BMP = "bmp"
    GIF = "gif"
    JPEG = "jpeg"

    @property
    def pil_format(self) -> str:
        """Format name understood by ``PIL.Image.Image.save``."""
        return self.value.upper()

    @property
    def is_lossy(self) -> bool:
        return self is ImageFormat.JPEG


class FontStyle(str, Enum):
    REGULAR = "regular"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold_italic"


SymbologyKind = Union[BarcodeType, Matrix2DCodeType]

EAN_TYPES: Final[FrozenSet[BarcodeType]] = frozenset(
    {BarcodeType.EAN8, BarcodeType.EAN13}
)

DEFAULT_IMAGE_FORMAT: Final[ImageFormat] = ImageFormat.PNG


def parse_kind(value: Union[str, SymbologyKind]) -> SymbologyKind:
    """Resolve a symbology tag from its enum or string value.

    Raises:
        ValueError: if the value names no known symbology.
    """
    if isinstance(value, (BarcodeType, Matrix2DCodeType)):
        return value
    key = str(value).strip().lower()
    for enum_cls in (BarcodeType, Matrix2DCodeType):
        try:
            return enum_cls(key)  # type: ignore[return-value]
        except ValueError:
            continue
    raise ValueError(f"Unknown symbology kind: {value!r}")


__all__ = [
    "BarcodeType",
    "Matrix2DCodeType",
    "ImageFormat",
    "FontStyle",
    "SymbologyKind",
    "EAN_TYPES",
    "DEFAULT_IMAGE_FORMAT",
    "parse_kind",
]
