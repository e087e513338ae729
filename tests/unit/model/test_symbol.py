from typing import Any, Dict
from unittest.mock import patch

import pytest

from barcode_raster.model.enums import BarcodeType, Matrix2DCodeType
from barcode_raster.model.symbol import (
    Barcode,
    BarcodeMetadata,
    BarcodeSymbol,
    ModuleGrid,
)


class TestBarcodeSymbol:
    """BarcodeSymbol construction, lookup and serialization."""

    @pytest.fixture
    def matrix(self) -> BarcodeSymbol:
        return BarcodeSymbol.from_rows(
            ["110", "011"], kind=Matrix2DCodeType.QR, content="xy", margin=1
        )

    def test_from_rows_strings(self, matrix: BarcodeSymbol) -> None:
        assert matrix.width == 3
        assert matrix.height == 2
        assert matrix.margin == 1
        assert matrix.metadata == BarcodeMetadata(Matrix2DCodeType.QR, "xy")
        assert matrix.at(0, 0) is True
        assert matrix.at(2, 0) is False
        assert matrix.at(0, 1) is False
        assert matrix.at(2, 1) is True

    def test_from_rows_sequences(self) -> None:
        sym = BarcodeSymbol.from_rows([[1, 0, True, False]], kind="code128")
        assert sym.metadata.kind is BarcodeType.CODE128
        assert sym.rows == ((True, False, True, False),)
        assert (sym.width, sym.height, sym.margin) == (4, 1, 0)

    def test_empty_rows(self) -> None:
        sym = BarcodeSymbol.from_rows([], kind=BarcodeType.EAN13)
        assert sym.width == 0
        assert sym.height == 0

    def test_ragged_rows_rejected(self) -> None:
        with pytest.raises(ValueError, match="same width"):
            BarcodeSymbol.from_rows(["101", "10"], kind="qr")

    def test_negative_margin_rejected(self) -> None:
        with pytest.raises(ValueError, match="margin"):
            BarcodeSymbol.from_rows(["1"], kind="qr", margin=-1)

    def test_bad_row_characters(self) -> None:
        with pytest.raises(ValueError, match="only '0' and '1'"):
            BarcodeSymbol.from_rows(["10x1"], kind="qr")

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            BarcodeSymbol.from_rows(["1"], kind="maxicode")

    def test_frozen(self, matrix: BarcodeSymbol) -> None:
        with pytest.raises(AttributeError):
            matrix.margin = 5  # type: ignore[misc]

    def test_protocols(self, matrix: BarcodeSymbol) -> None:
        assert isinstance(matrix, ModuleGrid)
        assert isinstance(matrix, Barcode)

    def test_dict_roundtrip(self, matrix: BarcodeSymbol) -> None:
        d = matrix.to_dict()
        assert d == {
            "schema_version": "1.0",
            "kind": "qr",
            "content": "xy",
            "margin": 1,
            "rows": ["110", "011"],
        }
        assert BarcodeSymbol.from_dict(d) == matrix

    def test_from_dict_version_mismatch_logs(self) -> None:
        data: Dict[str, Any] = {"schema_version": "0.9", "kind": "ean8", "rows": ["101"]}
        with patch("barcode_raster.model.symbol.logger") as mock_logger:
            sym = BarcodeSymbol.from_dict(data)
        assert sym.metadata.kind is BarcodeType.EAN8
        assert sym.margin == 0
        mock_logger.warning.assert_called_once()

    def test_str_truncates_content(self) -> None:
        sym = BarcodeSymbol.from_rows(["1"], kind="code128", content="A" * 20, margin=2)
        text = str(sym)
        assert "code128" in text
        assert "1x1" in text
        assert "A" * 16 + "..." in text
