"""
RU: Кодирование растра в контейнерные форматы (PNG, BMP, GIF, JPEG) через Pillow.
EN: Raster container encoders (PNG, BMP, GIF, JPEG) backed by Pillow.

The encoder is chosen once per renderer with ``resolve_encoder`` and then
reused for every render call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, Final, Mapping, Type, Union

from PIL import Image

from barcode_raster.model.enums import ImageFormat

from .config import DEFAULT_JPEG_QUALITY
from .exceptions import ConfigurationError, EncodeError

logger = logging.getLogger(__name__)

__all__ = [
    "ImageEncoder",
    "PngEncoder",
    "BmpEncoder",
    "GifEncoder",
    "JpegEncoder",
    "resolve_encoder",
]


@dataclass(frozen=True)
class ImageEncoder:
    """Base encoder: saves a Pillow image to a binary stream."""

    format: ImageFormat = ImageFormat.PNG

    def save_options(self) -> Dict[str, Any]:
        return {}

    def encode(self, image: Image.Image, output: BinaryIO) -> None:
        """
        Write ``image`` to ``output`` in this encoder's format.

        Raises:
            EncodeError: Pillow failed to encode or the stream rejected the write.
        """
        try:
            image.save(output, format=self.format.pil_format, **self.save_options())
        except (OSError, ValueError, KeyError) as e:
            logger.error("Encoding %s failed: %r", self.format.name, e)
            raise EncodeError(
                f"Failed to encode image as {self.format.name}: {e}",
                context={"format": self.format.value, "size": image.size},
            ) from e


@dataclass(frozen=True)
class PngEncoder(ImageEncoder):
    format: ImageFormat = ImageFormat.PNG

    def save_options(self) -> Dict[str, Any]:
        return {"optimize": True}


@dataclass(frozen=True)
class BmpEncoder(ImageEncoder):
    format: ImageFormat = ImageFormat.BMP


@dataclass(frozen=True)
class GifEncoder(ImageEncoder):
    format: ImageFormat = ImageFormat.GIF


@dataclass(frozen=True)
class JpegEncoder(ImageEncoder):
    format: ImageFormat = ImageFormat.JPEG
    quality: int = DEFAULT_JPEG_QUALITY

    def save_options(self) -> Dict[str, Any]:
        return {"quality": self.quality}


_ENCODERS: Final[Mapping[ImageFormat, Type[ImageEncoder]]] = {
    ImageFormat.PNG: PngEncoder,
    ImageFormat.BMP: BmpEncoder,
    ImageFormat.GIF: GifEncoder,
    ImageFormat.JPEG: JpegEncoder,
}


def resolve_encoder(
    image_format: Union[str, ImageFormat], jpeg_quality: int = DEFAULT_JPEG_QUALITY
) -> ImageEncoder:
    """
    Map an image format to its encoder.

    Raises:
        ConfigurationError: format is unknown.
    """
    key = image_format.value if isinstance(image_format, ImageFormat) else str(image_format).lower()
    try:
        fmt = ImageFormat(key)
    except ValueError:
        raise ConfigurationError(
            f"Requested image format {image_format!r} is not supported",
            field="image_format",
            value=image_format,
        ) from None
    encoder_cls = _ENCODERS.get(fmt)
    if encoder_cls is None:
        raise ConfigurationError(
            f"Requested image format {fmt.name} is not supported",
            field="image_format",
            value=image_format,
        )
    if fmt.is_lossy:
        return JpegEncoder(quality=jpeg_quality)
    return encoder_cls()
