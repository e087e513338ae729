"""
RU: Подпись цифр под штрихкодами EAN-8/EAN-13.
EN: Human-readable digit overlay for EAN-8 / EAN-13 bar codes.

The digits sit in two white wells carved over the bottom of the bars that lie
between the guard patterns. Longer guard bars (left, center, right) stay
untouched:

    EAN-13 guards at modules 0, 2, 46, 48, 92, 94
    EAN-8  guards at modules 0, 2, 32, 34, 64, 66

All geometry is in modules and is scaled by ``pixel_size`` at emission time.
Well columns are offset by the symbol margin; text x positions are absolute
and assume the usual 10-module EAN quiet zone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, List, Mapping, Optional, Tuple

from barcode_raster.model.enums import BarcodeType, FontStyle, SymbologyKind

from .commands import Color, DrawCommand, DrawText, FillRect, FontSpec
from .config import RenderConfig
from .exceptions import ContentLengthMismatchError

logger = logging.getLogger(__name__)

__all__ = [
    "EanTextGeometry",
    "EAN_TEXT_GEOMETRY",
    "geometry_for",
    "ean_overlay",
]


@dataclass(frozen=True)
class EanTextGeometry:
    """
    Fixed text layout of one EAN variant.

    Attributes:
        digits: Expected content length.
        wells: ``(start, width)`` of each well, in modules after the margin.
        groups: ``(start, end, x)`` per digit group: content slice bounds and
            the text x position in modules.
    """

    digits: int
    wells: Tuple[Tuple[int, int], ...]
    groups: Tuple[Tuple[int, int, float], ...]


EAN_TEXT_GEOMETRY: Final[Mapping[BarcodeType, EanTextGeometry]] = {
    BarcodeType.EAN13: EanTextGeometry(
        digits=13,
        wells=((3, 43), (49, 43)),
        groups=((0, 1, 4.0), (1, 7, 20.0), (7, 13, 65.0)),
    ),
    BarcodeType.EAN8: EanTextGeometry(
        digits=8,
        wells=((3, 29), (35, 29)),
        groups=((0, 4, 17.5), (4, 8, 49.5)),
    ),
}


def geometry_for(kind: SymbologyKind) -> Optional[EanTextGeometry]:
    """Return the overlay geometry for ``kind`` or None when it has no text overlay."""
    if isinstance(kind, BarcodeType) and kind.is_ean:
        return EAN_TEXT_GEOMETRY[kind]
    return None


def ean_overlay(
    kind: SymbologyKind,
    content: str,
    margin: int,
    config: RenderConfig,
    canvas_size: Tuple[int, int],
) -> Tuple[List[DrawCommand], Optional[ContentLengthMismatchError]]:
    """
    Build the well and text commands for an EAN symbol.

    Args:
        kind: Symbology tag; kinds without geometry produce no commands.
        content: Full EAN digit string.
        margin: Symbol quiet zone in modules.
        config: Render configuration (pixel size, bar height, well depth, font).
        canvas_size: ``(width, height)`` in pixels, used to clip the wells.

    Returns:
        ``(commands, issue)``. On a content length mismatch no commands are
        produced and ``issue`` describes the mismatch.
    """
    geometry = geometry_for(kind)
    if geometry is None:
        return [], None
    if len(content) != geometry.digits:
        issue = ContentLengthMismatchError(kind, geometry.digits, len(content))
        return [], issue

    ps = config.pixel_size
    width, height = canvas_size
    commands: List[DrawCommand] = []

    well_top = config.bar_height_1d * ps
    well_bottom = (config.bar_height_1d + config.content_margin) * ps
    for start, well_width in geometry.wells:
        rect = FillRect(
            (margin + start) * ps,
            well_top,
            (margin + start + well_width) * ps,
            well_bottom,
            Color.BACKGROUND,
        ).clipped(width, height)
        if not rect.is_empty:
            commands.append(rect)

    font = FontSpec(
        family=config.ean_font_family,
        size=config.font_size,
        style=FontStyle.REGULAR,
    )
    text_y = float((config.bar_height_1d + config.content_margin // 4) * ps)
    for start, end, x in geometry.groups:
        commands.append(DrawText(content[start:end], x * ps, text_y, font, Color.INK))

    logger.debug(
        "EAN overlay for %s: %d wells, %d text groups",
        kind.name,
        len(geometry.wells),
        len(geometry.groups),
    )
    return commands, None
