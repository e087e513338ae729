"""
RU: Раскладка сетки модулей в прямоугольники пикселей (1D и 2D).
EN: Pure layout of a module grid into pixel rectangles, for 1D and 2D shapes.

Canvas size:
    width  = (grid.width + 2 * margin) * pixel_size
    height = (effective_height + 2 * margin) * pixel_size

where ``effective_height`` is ``bar_height_1d`` for 1D grids (height 1) and
``grid.height`` for matrix grids. The layout never touches a canvas; it only
returns draw commands (see ``canvas.replay``).
"""

from __future__ import annotations

import logging
from typing import Final, List, Optional, Tuple

from barcode_raster.model.symbol import BarcodeMetadata, ModuleGrid

from .commands import Color, DrawCommand, FillCanvas, FillRect, Layout
from .config import RenderConfig
from .ean import ean_overlay
from .exceptions import CanvasSizeError, ContentLengthMismatchError, InvalidShapeError

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_CANVAS_WIDTH",
    "MAX_CANVAS_HEIGHT",
    "canvas_size",
    "layout",
]

# Верхняя граница размера холста, защищает от исчерпания памяти
MAX_CANVAS_WIDTH: Final[int] = 10000
MAX_CANVAS_HEIGHT: Final[int] = 10000


def _check_shape(grid: ModuleGrid) -> None:
    if grid.height <= 0:
        raise InvalidShapeError(
            f"Y value of {grid.height} is invalid",
            context={"height": grid.height},
        )
    if grid.width <= 0:
        raise InvalidShapeError(
            f"X value of {grid.width} is invalid",
            context={"width": grid.width},
        )
    if grid.margin < 0:
        raise InvalidShapeError(
            f"Margin of {grid.margin} is invalid",
            context={"margin": grid.margin},
        )


def canvas_size(grid: ModuleGrid, config: RenderConfig) -> Tuple[int, int]:
    """
    Return ``(width, height)`` of the canvas for ``grid`` in pixels.

    Raises:
        InvalidShapeError: grid height or width is not positive, or margin is negative.
        CanvasSizeError: the canvas exceeds MAX_CANVAS_WIDTH / MAX_CANVAS_HEIGHT.
    """
    _check_shape(grid)
    effective_height = config.bar_height_1d if grid.height == 1 else grid.height
    width = (grid.width + 2 * grid.margin) * config.pixel_size
    height = (effective_height + 2 * grid.margin) * config.pixel_size
    if width > MAX_CANVAS_WIDTH or height > MAX_CANVAS_HEIGHT:
        raise CanvasSizeError(
            f"Canvas {width}x{height}px exceeds maximum "
            f"{MAX_CANVAS_WIDTH}x{MAX_CANVAS_HEIGHT}px",
            context={"width": width, "height": height},
        )
    return width, height


def _layout_1d(
    grid: ModuleGrid,
    metadata: BarcodeMetadata,
    config: RenderConfig,
    size: Tuple[int, int],
) -> Tuple[List[DrawCommand], Optional[ContentLengthMismatchError]]:
    ps = config.pixel_size
    margin = grid.margin
    top = margin * ps
    bottom = (config.bar_height_1d + margin) * ps

    commands: List[DrawCommand] = [FillCanvas(Color.BACKGROUND)]
    for x in range(grid.width):
        if not grid.at(x, 0):
            continue
        commands.append(FillRect((margin + x) * ps, top, (margin + x + 1) * ps, bottom))

    if not config.include_ean_text:
        return commands, None
    overlay, issue = ean_overlay(metadata.kind, metadata.content, margin, config, size)
    commands.extend(overlay)
    return commands, issue


def _layout_2d(grid: ModuleGrid, config: RenderConfig) -> List[DrawCommand]:
    ps = config.pixel_size
    margin = grid.margin
    commands: List[DrawCommand] = [FillCanvas(Color.BACKGROUND)]
    for y in range(grid.height):
        y0 = (margin + y) * ps
        for x in range(grid.width):
            if not grid.at(x, y):
                continue
            x0 = (margin + x) * ps
            commands.append(FillRect(x0, y0, x0 + ps, y0 + ps))
    return commands


def layout(grid: ModuleGrid, metadata: BarcodeMetadata, config: RenderConfig) -> Layout:
    """
    Lay out ``grid`` as a sequence of draw commands.

    Grids of height 1 use the bar layout (bars ``bar_height_1d`` modules tall,
    optional EAN text overlay); taller grids use the matrix layout.

    Args:
        grid: Module grid with margin.
        metadata: Symbology tag and content, used only by the EAN overlay.
        config: Render configuration.

    Returns:
        Layout with canvas size, commands and any recoverable issues.

    Raises:
        InvalidShapeError: grid cannot be rasterized.
        CanvasSizeError: canvas would be too large.
    """
    size = canvas_size(grid, config)
    issues: Tuple[ContentLengthMismatchError, ...] = ()
    if grid.height == 1:
        commands, issue = _layout_1d(grid, metadata, config, size)
        if issue is not None:
            issues = (issue,)
    else:
        commands = _layout_2d(grid, config)

    logger.debug(
        "Layout %s %dx%d modules -> %dx%dpx, %d commands",
        "1D" if grid.height == 1 else "2D",
        grid.width,
        grid.height,
        size[0],
        size[1],
        len(commands),
    )
    return Layout(width=size[0], height=size[1], commands=tuple(commands), issues=issues)
