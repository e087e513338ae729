"""
Draw commands emitted by the layout step.

A layout is a flat, ordered sequence of commands against a grayscale canvas.
Rectangles are half-open in pixel space: ``[x0, x1) x [y0, y1)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Tuple, Union

from barcode_raster.model.enums import FontStyle

from .exceptions import ContentLengthMismatchError

__all__ = [
    "Color",
    "FontSpec",
    "FillCanvas",
    "FillRect",
    "DrawText",
    "DrawCommand",
    "Layout",
]


class Color(IntEnum):
    """Monochrome palette as 8-bit gray levels."""

    INK = 0
    BACKGROUND = 255


@dataclass(frozen=True)
class FontSpec:
    family: Optional[str]
    size: int
    style: FontStyle = FontStyle.REGULAR


@dataclass(frozen=True)
class FillCanvas:
    color: Color = Color.BACKGROUND


@dataclass(frozen=True)
class FillRect:
    x0: int
    y0: int
    x1: int
    y1: int
    color: Color = Color.INK

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def is_empty(self) -> bool:
        return self.x1 <= self.x0 or self.y1 <= self.y0

    def clipped(self, width: int, height: int) -> "FillRect":
        """Return the rectangle clipped to a ``width x height`` canvas."""
        return FillRect(
            max(0, min(self.x0, width)),
            max(0, min(self.y0, height)),
            max(0, min(self.x1, width)),
            max(0, min(self.y1, height)),
            self.color,
        )


@dataclass(frozen=True)
class DrawText:
    """Text whose top-left corner is placed at ``(x, y)`` pixels."""

    text: str
    x: float
    y: float
    font: FontSpec
    color: Color = Color.INK


DrawCommand = Union[FillCanvas, FillRect, DrawText]


@dataclass(frozen=True)
class Layout:
    """
    Result of laying out one symbol.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        commands: Ordered draw commands; later commands paint over earlier ones.
        issues: Recoverable problems found while laying out (text overlay only).
    """

    width: int
    height: int
    commands: Tuple[DrawCommand, ...] = ()
    issues: Tuple[ContentLengthMismatchError, ...] = field(default=())

    @property
    def rects(self) -> Tuple[FillRect, ...]:
        return tuple(c for c in self.commands if isinstance(c, FillRect))

    @property
    def texts(self) -> Tuple[DrawText, ...]:
        return tuple(c for c in self.commands if isinstance(c, DrawText))
