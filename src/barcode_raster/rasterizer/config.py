# -*- coding: utf-8 -*-
"""
RU: Параметры рендеринга штрихкода с проверкой при создании.
EN: Barcode render configuration, validated at construction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Final, Mapping, Optional, Union

from barcode_raster.model.enums import DEFAULT_IMAGE_FORMAT, ImageFormat

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_PIXEL_SIZE: Final[int] = 10
DEFAULT_BAR_HEIGHT_1D: Final[int] = 40
DEFAULT_JPEG_QUALITY: Final[int] = 75
DEFAULT_CONTENT_MARGIN: Final[int] = 10
EAN_FONT_SIZE_MODULES: Final[int] = 9
MIN_QUALITY: Final[int] = 0
MAX_QUALITY: Final[int] = 100


def _parse_format(value: Union[str, ImageFormat]) -> ImageFormat:
    if isinstance(value, ImageFormat):
        return value
    key = str(value).strip().lower()
    if key == "jpg":
        key = "jpeg"
    try:
        return ImageFormat(key)
    except ValueError:
        raise ConfigurationError(
            f"Requested image format {value!r} is not supported",
            field="image_format",
            value=value,
        ) from None


def _require_positive_int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            f"{name} must be an integer, got {type(value).__name__}",
            field=name,
            value=value,
        )
    if value <= 0:
        raise ConfigurationError(
            f"{name} must be larger than zero, got {value}", field=name, value=value
        )


@dataclass(frozen=True)
class RenderConfig:
    """
    Rasterization and output parameters.

    Attributes:
        pixel_size: Edge length of one module in output pixels.
        bar_height_1d: Bar height, in modules, synthesized for 1D symbols.
        image_format: Output container format.
        jpeg_quality: JPEG quality (0..100); validated for every format.
        include_ean_text: Draw the digit groups under EAN-8/EAN-13 symbols.
        ean_font_family: Font family for EAN digits. None selects Pillow's
            bundled scalable font.
        content_margin: Depth of the EAN text well, in modules.

    Examples:
        >>> cfg = RenderConfig(pixel_size=4, include_ean_text=True)
        >>> cfg.bar_height_1d
        40
        >>> RenderConfig(image_format="jpg", jpeg_quality=90).image_format
        <ImageFormat.JPEG: 'jpeg'>
    """

    pixel_size: int = DEFAULT_PIXEL_SIZE
    bar_height_1d: int = DEFAULT_BAR_HEIGHT_1D
    image_format: ImageFormat = DEFAULT_IMAGE_FORMAT
    jpeg_quality: int = DEFAULT_JPEG_QUALITY
    include_ean_text: bool = False
    ean_font_family: Optional[str] = None
    content_margin: int = DEFAULT_CONTENT_MARGIN

    def __post_init__(self) -> None:
        """Validate parameters."""
        _require_positive_int("pixel_size", self.pixel_size)
        _require_positive_int("bar_height_1d", self.bar_height_1d)
        _require_positive_int("content_margin", self.content_margin)
        if isinstance(self.jpeg_quality, bool) or not isinstance(self.jpeg_quality, int):
            raise ConfigurationError(
                "jpeg_quality must be an integer",
                field="jpeg_quality",
                value=self.jpeg_quality,
            )
        if not MIN_QUALITY <= self.jpeg_quality <= MAX_QUALITY:
            raise ConfigurationError(
                f"jpeg_quality must be a value between {MIN_QUALITY} and {MAX_QUALITY}",
                field="jpeg_quality",
                value=self.jpeg_quality,
            )
        object.__setattr__(self, "image_format", _parse_format(self.image_format))
        if self.ean_font_family is not None and not str(self.ean_font_family).strip():
            raise ConfigurationError(
                "ean_font_family must be a non-empty string or None",
                field="ean_font_family",
                value=self.ean_font_family,
            )

    @property
    def font_size(self) -> int:
        """EAN digit font size in pixels."""
        return EAN_FONT_SIZE_MODULES * self.pixel_size

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RenderConfig":
        """
        Create configuration from a plain mapping (e.g. parsed JSON).

        Keys that are not RenderConfig fields are ignored.

        Examples:
            >>> RenderConfig.from_mapping({"pixel_size": 3, "image_format": "jpg"}).image_format
            <ImageFormat.JPEG: 'jpeg'>
        """
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        ignored = sorted(set(data) - known)
        if ignored:
            logger.debug("Ignoring non-render config keys: %s", ", ".join(ignored))
        return cls(**kwargs)

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> "RenderConfig":
        """Load JSON configuration (see ``barcode_raster.load_config``) and validate it."""
        from barcode_raster import load_config

        return cls.from_mapping(load_config(config_path))


__all__ = [
    "RenderConfig",
    "DEFAULT_PIXEL_SIZE",
    "DEFAULT_BAR_HEIGHT_1D",
    "DEFAULT_JPEG_QUALITY",
    "DEFAULT_CONTENT_MARGIN",
    "EAN_FONT_SIZE_MODULES",
]
