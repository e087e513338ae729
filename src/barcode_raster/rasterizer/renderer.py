"""
RU: Рендерер штрихкодов в растровые изображения (PNG/BMP/GIF/JPEG).
EN: Barcode symbol to raster image renderer (PNG/BMP/GIF/JPEG).

Pipeline per call:
    layout (pure)  ->  replay onto a fresh canvas  ->  encode to the output stream

The renderer holds only immutable state (config, encoder, adapters) and can be
shared between threads; every call paints its own canvas.
"""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from io import BytesIO
from typing import Any, BinaryIO, Iterable, List, Optional

from PIL import Image

from barcode_raster.model.enums import ImageFormat
from barcode_raster.model.symbol import Barcode

from .canvas import CanvasFactory, FontProvider, PillowCanvas, PillowFontProvider, paint
from .commands import Layout
from .config import RenderConfig
from .encoder import ImageEncoder, resolve_encoder
from .exceptions import ConfigurationError, ContentLengthMismatchError
from .shape_layout import layout as layout_symbol

logger = logging.getLogger(__name__)

__all__ = [
    "ImageRenderer",
    "RenderReport",
]


@dataclass(frozen=True)
class RenderReport:
    """
    Outcome of one ``ImageRenderer.render`` call.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        format: Container format written.
        bytes_written: Bytes written to the output, None for non-seekable streams.
        overlay_error: Text overlay problem, if any (bars were still drawn).
    """

    width: int
    height: int
    format: ImageFormat
    bytes_written: Optional[int] = None
    overlay_error: Optional[ContentLengthMismatchError] = None


def _tell(stream: BinaryIO) -> Optional[int]:
    try:
        return stream.tell()
    except (OSError, AttributeError):
        return None


class ImageRenderer:
    """
    Render barcode symbols to raster images.

    Args:
        config: Render configuration; defaults to ``RenderConfig()``.
        font_provider: Font resolver for the EAN overlay.
        canvas_factory: ``(width, height) -> Canvas``; defaults to PillowCanvas.
        **options: RenderConfig field overrides applied on top of ``config``.

    Raises:
        ConfigurationError: invalid or unknown configuration values.

    Examples:
        >>> renderer = ImageRenderer(pixel_size=4, include_ean_text=True)
        >>> png = renderer.render_bytes(encode_linear(BarcodeType.EAN13, "5901234123457"))
        >>> png[:4]
        b'\\x89PNG'
    """

    def __init__(
        self,
        config: Optional[RenderConfig] = None,
        *,
        font_provider: Optional[FontProvider] = None,
        canvas_factory: Optional[CanvasFactory] = None,
        **options: Any,
    ) -> None:
        cfg = config if config is not None else RenderConfig()
        if options:
            try:
                cfg = dataclasses.replace(cfg, **options)
            except TypeError as e:
                raise ConfigurationError(
                    f"Unknown renderer option(s): {sorted(options)}"
                ) from e
        self.config: RenderConfig = cfg
        self.encoder: ImageEncoder = resolve_encoder(cfg.image_format, cfg.jpeg_quality)
        self._fonts: FontProvider = font_provider or PillowFontProvider()
        self._canvas_factory: CanvasFactory = canvas_factory or PillowCanvas.create
        logger.debug("ImageRenderer configured: %r", cfg)

    def layout(self, barcode: Barcode) -> Layout:
        """Return the draw commands for ``barcode`` without painting anything."""
        if not isinstance(barcode, Barcode):
            raise TypeError(f"barcode must provide the Barcode protocol, got {type(barcode)!r}")
        return layout_symbol(barcode, barcode.metadata, self.config)

    def _checked_layout(self, barcode: Barcode, strict: bool) -> Layout:
        lay = self.layout(barcode)
        for issue in lay.issues:
            if strict:
                raise issue
            logger.warning("%s; rendering bars without text", issue)
        return lay

    def render_image(self, barcode: Barcode, strict: bool = False) -> Image.Image:
        """
        Rasterize ``barcode`` into a grayscale (mode "L") Pillow image.

        Args:
            barcode: Symbol to render.
            strict: Raise ContentLengthMismatchError instead of dropping the EAN text.
        """
        lay = self._checked_layout(barcode, strict)
        return paint(lay, self._canvas_factory, self._fonts).to_image()

    def render(self, barcode: Barcode, output: BinaryIO, strict: bool = False) -> RenderReport:
        """
        Rasterize ``barcode`` and write the encoded image to ``output``.

        Nothing is written when layout fails.

        Raises:
            InvalidShapeError: grid cannot be rasterized.
            CanvasSizeError: canvas would exceed the size limit.
            ContentLengthMismatchError: only with ``strict=True``.
            FontNotFoundError: EAN font family is unavailable.
            EncodeError: the encoder failed.
        """
        lay = self._checked_layout(barcode, strict)
        image = paint(lay, self._canvas_factory, self._fonts).to_image()
        start = _tell(output)
        self.encoder.encode(image, output)
        end = _tell(output)
        written = end - start if start is not None and end is not None else None
        logger.info(
            "Rendered %s: %dx%dpx %s (%s bytes)",
            barcode.metadata.kind.name,
            lay.width,
            lay.height,
            self.encoder.format.name,
            written if written is not None else "?",
        )
        return RenderReport(
            width=lay.width,
            height=lay.height,
            format=self.encoder.format,
            bytes_written=written,
            overlay_error=lay.issues[0] if lay.issues else None,
        )

    def render_bytes(self, barcode: Barcode, strict: bool = False) -> bytes:
        buf = BytesIO()
        self.render(barcode, buf, strict=strict)
        return buf.getvalue()

    async def render_bytes_async(self, barcode: Barcode, strict: bool = False) -> bytes:
        """Async wrapper for render_bytes (runs in the default executor)."""
        import asyncio

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, lambda: self.render_bytes(barcode, strict=strict)
        )

    def batch_render(
        self,
        barcodes: Iterable[Barcode],
        parallel: bool = False,
        strict: bool = False,
    ) -> List[bytes]:
        """
        Render many symbols, preserving input order.

        Args:
            barcodes: Symbols to render.
            parallel: Use a thread pool; each call still gets its own canvas.
            strict: Passed through to ``render_bytes``.
        """
        items = list(barcodes)

        def gen(item: Barcode) -> bytes:
            return self.render_bytes(item, strict=strict)

        if parallel:
            with ThreadPoolExecutor() as pool:
                result = list(pool.map(gen, items))
        else:
            result = [gen(i) for i in items]
        logger.info("Batch render complete: %d items", len(items))
        return result
