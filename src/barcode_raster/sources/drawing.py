"""
RU: Снятие сетки модулей с векторных виджетов штрихкодов reportlab.
EN: Module grids sampled from reportlab barcode widgets.

Widgets are created with a one-unit module (``barWidth=1``) and no quiet
zone, so every filled Rect of the drawn Group lies on integer module
coordinates. reportlab uses a bottom-left origin; matrix rows are flipped to
top-to-bottom order here.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from reportlab.graphics.barcode import getCodes
from reportlab.graphics.shapes import Group, Rect

from barcode_raster.rasterizer.exceptions import SymbolEncodeError

logger = logging.getLogger(__name__)

__all__ = [
    "MODULE_ATTRS",
    "create_widget",
    "filled_boxes",
    "widget_row",
    "widget_rows",
]

Box = Tuple[int, int, int, int]

# Widget attributes that put one module on one drawing unit
MODULE_ATTRS: Dict[str, Any] = {"barWidth": 1}


def create_widget(code_name: str, value: str, **attrs: Any) -> Any:
    """
    Instantiate the reportlab widget registered as ``code_name``.

    Raises:
        SymbolEncodeError: unknown widget, rejected attribute or invalid value.
    """
    try:
        widget_cls = getCodes()[code_name]
    except KeyError:
        raise SymbolEncodeError(f"reportlab has no barcode widget {code_name!r}") from None
    try:
        widget = widget_cls(value=value, **MODULE_ATTRS, **attrs)
    except (AttributeError, TypeError, ValueError) as e:
        raise SymbolEncodeError(f"{code_name} widget rejected its options: {e}") from e

    # older widgets validate lazily; same check as createBarcodeDrawing
    if hasattr(widget, "validate"):
        widget.validate()
        if not widget.valid:
            raise SymbolEncodeError(f"Illegal value {value!r} for {code_name}")
    return widget


def filled_boxes(group: Group) -> List[Box]:
    """Integer ``(x0, y0, x1, y1)`` of every filled Rect in ``group``, nested groups included."""
    boxes: List[Box] = []
    for shape in group.contents:
        if isinstance(shape, Group):
            boxes.extend(filled_boxes(shape))
            continue
        if not isinstance(shape, Rect) or shape.fillColor is None:
            continue
        x0, y0 = round(shape.x), round(shape.y)
        x1, y1 = round(shape.x + shape.width), round(shape.y + shape.height)
        if x1 > x0 and y1 > y0:
            boxes.append((x0, y0, x1, y1))
    return boxes


def _draw(widget: Any, code_name: str) -> List[Box]:
    try:
        group = widget.draw()
    except Exception as e:
        logger.error("%s drawing failed: %r", code_name, e)
        raise SymbolEncodeError(f"{code_name} encoding failed: {e}") from e
    boxes = filled_boxes(group)
    if not boxes:
        raise SymbolEncodeError(f"{code_name} produced no modules")
    return boxes


def widget_row(widget: Any, code_name: str) -> List[bool]:
    """Sample a bar code widget into one module row (True = bar)."""
    boxes = _draw(widget, code_name)
    width = max(b[2] for b in boxes)
    row = [False] * width
    for x0, _, x1, _ in boxes:
        for x in range(max(x0, 0), x1):
            row[x] = True
    return row


def widget_rows(widget: Any, code_name: str) -> List[List[bool]]:
    """Sample a matrix code widget into module rows, top row first."""
    boxes = _draw(widget, code_name)
    width = max(b[2] for b in boxes)
    height = max(b[3] for b in boxes)
    rows = [[False] * width for _ in range(height)]
    for x0, y0, x1, y1 in boxes:
        for y in range(max(y0, 0), y1):
            row = rows[height - 1 - y]
            for x in range(max(x0, 0), x1):
                row[x] = True
    return rows
