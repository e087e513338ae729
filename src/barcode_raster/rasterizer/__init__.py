"""
rasterizer

Растеризация сеток модулей штрихкодов в изображения.

- Чистая раскладка: ``layout(grid, metadata, config)`` возвращает команды рисования.
- 1D (высота 1) и 2D (высота > 1) формы, подпись цифр EAN-8/EAN-13.
- Pillow-адаптеры холста, шрифтов и кодировщиков PNG/BMP/GIF/JPEG.

Public API:
    - ImageRenderer: рендерер символов в изображения (class)
    - RenderConfig: проверяемая конфигурация рендеринга (dataclass)
    - layout / canvas_size: чистая раскладка
    - replay / paint: воспроизведение команд на холсте
    - RasterError и подклассы: ошибки

Примеры:
    >>> from barcode_raster.rasterizer import ImageRenderer, RenderConfig
    >>> renderer = ImageRenderer(RenderConfig(pixel_size=2))
    >>> image = renderer.render_image(symbol)

Зависимости:
    Pillow
"""

from barcode_raster.rasterizer.canvas import (
    Canvas,
    FontProvider,
    PillowCanvas,
    PillowFontProvider,
    paint,
    replay,
)
from barcode_raster.rasterizer.commands import (
    Color,
    DrawCommand,
    DrawText,
    FillCanvas,
    FillRect,
    FontSpec,
    Layout,
)
from barcode_raster.rasterizer.config import RenderConfig
from barcode_raster.rasterizer.encoder import ImageEncoder, resolve_encoder
from barcode_raster.rasterizer.exceptions import (
    CanvasSizeError,
    ConfigurationError,
    ContentLengthMismatchError,
    EncodeError,
    FontNotFoundError,
    InvalidShapeError,
    RasterError,
    RenderError,
    SymbolEncodeError,
)
from barcode_raster.rasterizer.shape_layout import canvas_size, layout
from barcode_raster.rasterizer.renderer import ImageRenderer, RenderReport

__all__ = [
    "ImageRenderer",
    "RenderReport",
    "RenderConfig",
    "layout",
    "canvas_size",
    "replay",
    "paint",
    "Canvas",
    "FontProvider",
    "PillowCanvas",
    "PillowFontProvider",
    "ImageEncoder",
    "resolve_encoder",
    "Color",
    "DrawCommand",
    "DrawText",
    "FillCanvas",
    "FillRect",
    "FontSpec",
    "Layout",
    "RasterError",
    "ConfigurationError",
    "RenderError",
    "InvalidShapeError",
    "CanvasSizeError",
    "ContentLengthMismatchError",
    "FontNotFoundError",
    "EncodeError",
    "SymbolEncodeError",
]
