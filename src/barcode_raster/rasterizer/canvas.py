"""
Canvas and font adapters for replaying a layout.

Protocols:
    - Canvas: grayscale raster surface (fill, fill_rect, draw_text, to_image)
    - FontProvider: resolves (family, size, style) to a font object

Pillow implementations:
    - PillowCanvas: mode "L" image, rectangles via ``Image.paste`` (exact half-open boxes)
    - PillowFontProvider: ``ImageFont.truetype`` lookup by family name,
      ``ImageFont.load_default(size=...)`` for the bundled family (None)

Example:
    >>> lay = layout(symbol, symbol.metadata, RenderConfig())
    >>> canvas = paint(lay)
    >>> canvas.to_image().size == (lay.width, lay.height)
    True
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from PIL import Image, ImageDraw, ImageFont

from barcode_raster.model.enums import FontStyle

from .commands import Color, DrawText, FillCanvas, FillRect, FontSpec, Layout
from .exceptions import FontNotFoundError

logger = logging.getLogger(__name__)

__all__ = [
    "Canvas",
    "CanvasFactory",
    "FontProvider",
    "PillowCanvas",
    "PillowFontProvider",
    "replay",
    "paint",
]


@runtime_checkable
class Canvas(Protocol):
    width: int
    height: int

    def fill(self, color: Color) -> None:
        ...

    def fill_rect(self, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
        """Fill the half-open box ``[x0, x1) x [y0, y1)``."""
        ...

    def draw_text(
        self, text: str, font: Any, color: Color, position: Tuple[float, float]
    ) -> None:
        ...

    def to_image(self) -> Image.Image:
        ...


CanvasFactory = Callable[[int, int], Canvas]


@runtime_checkable
class FontProvider(Protocol):
    def resolve(self, family: Optional[str], size: int, style: FontStyle) -> Any:
        """Return a font object usable by the canvas.

        Raises:
            FontNotFoundError: family is not available.
        """
        ...


class PillowCanvas:
    """Grayscale Pillow canvas, created blank with the background color."""

    MODE = "L"

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._image = Image.new(self.MODE, (width, height), int(Color.BACKGROUND))
        self._draw = ImageDraw.Draw(self._image)

    @classmethod
    def create(cls, width: int, height: int) -> "PillowCanvas":
        return cls(width, height)

    def fill(self, color: Color) -> None:
        self._image.paste(int(color), (0, 0, self.width, self.height))

    def fill_rect(self, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
        if x1 <= x0 or y1 <= y0:
            return
        self._image.paste(int(color), (x0, y0, x1, y1))

    def draw_text(
        self, text: str, font: Any, color: Color, position: Tuple[float, float]
    ) -> None:
        self._draw.text(position, text, font=font, fill=int(color))

    def to_image(self) -> Image.Image:
        return self._image


_STYLE_SUFFIXES: Dict[FontStyle, Tuple[str, ...]] = {
    FontStyle.REGULAR: ("", "-Regular"),
    FontStyle.BOLD: ("-Bold", "bd"),
    FontStyle.ITALIC: ("-Italic", "-Oblique", "i"),
    FontStyle.BOLD_ITALIC: ("-BoldItalic", "-BoldOblique", "bi"),
}


class PillowFontProvider:
    """
    Resolve fonts through Pillow.

    A family is tried as given (file name or path), then as
    ``<family><suffix>.ttf`` / ``.otf`` for the requested style. Pillow searches
    the platform font directories for bare file names. ``family=None`` returns
    Pillow's bundled scalable font.

    Resolved fonts are cached per (family, size, style); the cache is guarded
    by a lock so one provider can serve concurrent renders.
    """

    def __init__(self) -> None:
        self._cache: Dict[Tuple[Optional[str], int, FontStyle], Any] = {}
        self._lock = threading.Lock()

    @staticmethod
    def candidates(family: str, style: FontStyle) -> List[str]:
        names: List[str] = []
        for suffix in _STYLE_SUFFIXES[style]:
            for ext in (".ttf", ".otf"):
                names.append(f"{family}{suffix}{ext}")
        if style is FontStyle.REGULAR:
            names.insert(0, family)
        return names

    def resolve(self, family: Optional[str], size: int, style: FontStyle = FontStyle.REGULAR) -> Any:
        key = (family, size, style)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            font = self._load(family, size, style)
            self._cache[key] = font
            return font

    def _load(self, family: Optional[str], size: int, style: FontStyle) -> Any:
        if family is None:
            return ImageFont.load_default(size=size)
        for name in self.candidates(family, style):
            try:
                font = ImageFont.truetype(name, size)
            except OSError:
                continue
            logger.debug("Font %r resolved to %r (size=%d)", family, name, size)
            return font
        logger.error("Font family %r (%s) not found", family, style.value)
        raise FontNotFoundError(family, size, style)


def replay(layout: Layout, canvas: Canvas, fonts: FontProvider) -> Canvas:
    """Apply the layout's commands to ``canvas`` in order and return it."""
    resolved: Dict[FontSpec, Any] = {}
    for command in layout.commands:
        if isinstance(command, FillRect):
            canvas.fill_rect(command.x0, command.y0, command.x1, command.y1, command.color)
        elif isinstance(command, FillCanvas):
            canvas.fill(command.color)
        elif isinstance(command, DrawText):
            spec = command.font
            if spec not in resolved:
                resolved[spec] = fonts.resolve(spec.family, spec.size, spec.style)
            canvas.draw_text(command.text, resolved[spec], command.color, (command.x, command.y))
        else:
            raise TypeError(f"Unknown draw command: {command!r}")
    return canvas


def paint(
    layout: Layout,
    canvas_factory: Optional[CanvasFactory] = None,
    fonts: Optional[FontProvider] = None,
) -> Canvas:
    """Create a canvas sized for ``layout`` and replay the layout onto it."""
    factory = canvas_factory or PillowCanvas.create
    canvas = factory(layout.width, layout.height)
    return replay(layout, canvas, fonts or PillowFontProvider())
