"""
Исключения растеризатора штрихкодов.

Иерархия:
    RasterError (базовое)
    ├── ConfigurationError      (также ValueError; при создании конфигурации)
    ├── RenderError             (во время рендеринга)
    │   ├── InvalidShapeError
    │   ├── CanvasSizeError
    │   └── ContentLengthMismatchError
    ├── FontNotFoundError
    ├── EncodeError
    └── SymbolEncodeError

Example:
    >>> try:
    ...     renderer.render(symbol, stream)
    ... except RenderError as e:
    ...     logger.error("Render failed: %s (%s)", e, e.context)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__: list[str] = [
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


class RasterError(Exception):
    """
    Base class for every error raised by barcode_raster.

    Attributes:
        message: Human-readable description.
        context: Extra values for debugging (field names, sizes, kinds).
    """

    def __init__(
        self,
        message: str,
        *,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{details}]"


class ConfigurationError(RasterError, ValueError):
    """Invalid renderer configuration, raised at construction time."""

    def __init__(self, message: str, *, field: Optional[str] = None, value: Any = None) -> None:
        context: Dict[str, Any] = {}
        if field is not None:
            context = {"field": field, "value": value}
        super().__init__(message, context=context)
        self.field = field
        self.value = value


class RenderError(RasterError):
    """Base class for failures detected while laying out a symbol."""


class InvalidShapeError(RenderError):
    """Grid dimensions (or margin) cannot be rasterized."""


class CanvasSizeError(RenderError):
    """Computed canvas exceeds the maximum supported pixel size."""


class ContentLengthMismatchError(RenderError):
    """
    EAN content does not have the digit count the symbology requires.

    Recoverable: bars are still drawn, only the text overlay is omitted.
    """

    def __init__(self, kind: Any, expected: int, actual: int) -> None:
        name = getattr(kind, "name", str(kind))
        super().__init__(
            f"{name} text overlay needs {expected} characters, got {actual}",
            context={"kind": name, "expected": expected, "actual": actual},
        )
        self.kind = kind
        self.expected = expected
        self.actual = actual


class FontNotFoundError(RasterError):
    """Requested font family is not available on this host."""

    def __init__(self, family: str, size: int, style: Any = None) -> None:
        super().__init__(
            f"Font family {family!r} not found",
            context={"family": family, "size": size, "style": getattr(style, "value", style)},
        )
        self.family = family
        self.size = size
        self.style = style


class EncodeError(RasterError):
    """Image container encoding or writing to the output failed."""


class SymbolEncodeError(RasterError):
    """An upstream barcode encoder rejected the data or failed."""
