# RU: Доменная модель символа штрихкода: сетка модулей, поле тишины и метаданные символики.
# EN: Barcode symbol domain model: module grid, quiet-zone margin and symbology metadata.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    ClassVar,
    Dict,
    Iterable,
    List,
    Protocol,
    Sequence,
    Tuple,
    Union,
    runtime_checkable,
)

from .enums import SymbologyKind, parse_kind

logger = logging.getLogger(__name__)

__all__ = [
    "ModuleGrid",
    "Barcode",
    "BarcodeMetadata",
    "BarcodeSymbol",
]

RowLike = Union[str, Sequence[Union[bool, int]]]


@runtime_checkable
class ModuleGrid(Protocol):
    """Read-only grid of modules as produced by an upstream encoder.

    Attributes:
        width: Module count along X.
        height: Module count along Y (1 for bar codes, >1 for matrix codes).
        margin: Quiet zone in modules, identical on all four sides.
    """

    width: int
    height: int
    margin: int

    def at(self, x: int, y: int) -> bool:
        """Return True when the module at (x, y) carries ink."""
        ...


@dataclass(frozen=True)
class BarcodeMetadata:
    """Symbology tag and the human-readable content encoded by the symbol."""

    kind: SymbologyKind
    content: str = ""


@runtime_checkable
class Barcode(ModuleGrid, Protocol):
    """Module grid that also carries its symbology metadata."""

    metadata: BarcodeMetadata


def _parse_row(row: RowLike) -> Tuple[bool, ...]:
    if isinstance(row, str):
        bad = set(row) - {"0", "1"}
        if bad:
            raise ValueError(f"Row string may contain only '0' and '1', got {sorted(bad)!r}")
        return tuple(ch == "1" for ch in row)
    return tuple(bool(v) for v in row)


@dataclass(frozen=True)
class BarcodeSymbol:
    """
    Immutable module grid with margin and metadata.

    Rows are stored top to bottom as tuples of booleans (True = ink).
    ``width`` and ``height`` are derived from the rows.

    Examples:
        >>> sym = BarcodeSymbol.from_rows(["1011"], margin=2, kind=BarcodeType.CODE128)
        >>> sym.width, sym.height
        (4, 1)
        >>> sym.at(1, 0)
        False
    """

    schema_version: ClassVar[str] = "1.0"

    rows: Tuple[Tuple[bool, ...], ...]
    metadata: BarcodeMetadata
    margin: int = 0
    width: int = field(init=False)
    height: int = field(init=False)

    def __post_init__(self) -> None:
        if self.margin < 0:
            raise ValueError(f"margin must be >= 0, got {self.margin}")
        widths = {len(r) for r in self.rows}
        if len(widths) > 1:
            raise ValueError(f"All rows must have the same width, got {sorted(widths)}")
        object.__setattr__(self, "width", widths.pop() if widths else 0)
        object.__setattr__(self, "height", len(self.rows))

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[RowLike],
        *,
        kind: Union[str, SymbologyKind],
        content: str = "",
        margin: int = 0,
    ) -> "BarcodeSymbol":
        """Build a symbol from ``"0101"`` strings or bool/int sequences."""
        parsed = tuple(_parse_row(r) for r in rows)
        return cls(
            rows=parsed,
            metadata=BarcodeMetadata(kind=parse_kind(kind), content=content),
            margin=margin,
        )

    def at(self, x: int, y: int) -> bool:
        return self.rows[y][x]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "kind": self.metadata.kind.value,
            "content": self.metadata.content,
            "margin": self.margin,
            "rows": ["".join("1" if v else "0" for v in row) for row in self.rows],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BarcodeSymbol":
        d = dict(d)
        version = d.pop("schema_version", cls.schema_version)
        if version != cls.schema_version:
            logger.warning(
                "Schema version mismatch (expected %s, got %s)",
                cls.schema_version,
                version,
            )
        rows: List[str] = list(d.get("rows", []))
        return cls.from_rows(
            rows,
            kind=d["kind"],
            content=d.get("content", ""),
            margin=int(d.get("margin", 0)),
        )

    def __str__(self) -> str:
        content = self.metadata.content
        shown = content[:16] + ("..." if len(content) > 16 else "")
        return (
            f"BarcodeSymbol({self.metadata.kind.value}, {self.width}x{self.height}, "
            f"margin={self.margin}, content={shown})"
        )
