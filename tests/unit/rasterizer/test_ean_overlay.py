from typing import List
from unittest.mock import patch

import pytest

from barcode_raster.model.enums import BarcodeType, FontStyle, Matrix2DCodeType
from barcode_raster.rasterizer.commands import Color, DrawText, FillRect, FontSpec
from barcode_raster.rasterizer.config import RenderConfig
from barcode_raster.rasterizer.ean import (
    EAN_TEXT_GEOMETRY,
    ean_overlay,
    geometry_for,
)
from barcode_raster.rasterizer.exceptions import ContentLengthMismatchError


def _rects(commands: List[object]) -> List[FillRect]:
    return [c for c in commands if isinstance(c, FillRect)]


def _texts(commands: List[object]) -> List[DrawText]:
    return [c for c in commands if isinstance(c, DrawText)]


@pytest.mark.parametrize(
    "kind,has_geometry",
    [
        (BarcodeType.EAN13, True),
        (BarcodeType.EAN8, True),
        (BarcodeType.EAN14, False),
        (BarcodeType.UPCA, False),
        (BarcodeType.CODE128, False),
        (Matrix2DCodeType.QR, False),
    ],
)
def test_geometry_for(kind: object, has_geometry: bool) -> None:
    assert (geometry_for(kind) is not None) is has_geometry  # type: ignore[arg-type]


def test_geometry_follows_ean_types() -> None:
    """Only kinds listed in EAN_TYPES get the text overlay."""
    with patch("barcode_raster.model.enums.EAN_TYPES", frozenset({BarcodeType.EAN8})):
        assert geometry_for(BarcodeType.EAN13) is None
        assert geometry_for(BarcodeType.EAN8) is EAN_TEXT_GEOMETRY[BarcodeType.EAN8]


def test_geometry_tables() -> None:
    ean13 = EAN_TEXT_GEOMETRY[BarcodeType.EAN13]
    assert ean13.digits == 13
    assert ean13.wells == ((3, 43), (49, 43))
    assert ean13.groups == ((0, 1, 4.0), (1, 7, 20.0), (7, 13, 65.0))
    ean8 = EAN_TEXT_GEOMETRY[BarcodeType.EAN8]
    assert ean8.digits == 8
    assert ean8.wells == ((3, 29), (35, 29))
    assert ean8.groups == ((0, 4, 17.5), (4, 8, 49.5))


class TestEan13Overlay:
    @pytest.fixture
    def config(self) -> RenderConfig:
        return RenderConfig(pixel_size=1, include_ean_text=True)

    def test_wells(self, config: RenderConfig) -> None:
        commands, issue = ean_overlay(BarcodeType.EAN13, "5901234123457", 10, config, (115, 60))
        assert issue is None
        assert _rects(commands) == [
            FillRect(13, 40, 56, 50, Color.BACKGROUND),
            FillRect(59, 40, 102, 50, Color.BACKGROUND),
        ]

    def test_text_groups(self, config: RenderConfig) -> None:
        commands, _ = ean_overlay(BarcodeType.EAN13, "5901234123457", 10, config, (115, 60))
        font = FontSpec(None, 9, FontStyle.REGULAR)
        assert _texts(commands) == [
            DrawText("5", 4.0, 42.0, font, Color.INK),
            DrawText("901234", 20.0, 42.0, font, Color.INK),
            DrawText("123457", 65.0, 42.0, font, Color.INK),
        ]

    def test_scaled_by_pixel_size(self) -> None:
        cfg = RenderConfig(pixel_size=4, include_ean_text=True, ean_font_family="DejaVuSans")
        commands, _ = ean_overlay(BarcodeType.EAN13, "5901234123457", 10, cfg, (460, 240))
        rects = _rects(commands)
        assert rects[0] == FillRect(52, 160, 224, 200, Color.BACKGROUND)
        assert rects[1] == FillRect(236, 160, 408, 200, Color.BACKGROUND)
        texts = _texts(commands)
        assert [(t.x, t.y) for t in texts] == [(16.0, 168.0), (80.0, 168.0), (260.0, 168.0)]
        assert all(t.font == FontSpec("DejaVuSans", 36) for t in texts)

    def test_text_x_ignores_margin(self, config: RenderConfig) -> None:
        commands, _ = ean_overlay(BarcodeType.EAN13, "5901234123457", 0, config, (95, 40))
        assert [t.x for t in _texts(commands)] == [4.0, 20.0, 65.0]

    def test_wells_clipped_to_canvas(self, config: RenderConfig) -> None:
        # margin 2: canvas is 44 modules tall, the well would reach 50
        commands, _ = ean_overlay(BarcodeType.EAN13, "5901234123457", 2, config, (99, 44))
        rects = _rects(commands)
        assert [(r.y0, r.y1) for r in rects] == [(40, 44), (40, 44)]

    def test_fully_clipped_wells_dropped(self, config: RenderConfig) -> None:
        commands, issue = ean_overlay(BarcodeType.EAN13, "5901234123457", 0, config, (95, 40))
        assert issue is None
        assert _rects(commands) == []
        assert len(_texts(commands)) == 3


class TestEan8Overlay:
    def test_layout(self) -> None:
        cfg = RenderConfig(pixel_size=2, include_ean_text=True)
        commands, issue = ean_overlay(BarcodeType.EAN8, "96385074", 10, cfg, (174, 120))
        assert issue is None
        assert _rects(commands) == [
            FillRect(26, 80, 84, 100, Color.BACKGROUND),
            FillRect(90, 80, 148, 100, Color.BACKGROUND),
        ]
        texts = _texts(commands)
        assert [t.text for t in texts] == ["9638", "5074"]
        assert [t.x for t in texts] == [35.0, 99.0]
        assert all(t.y == 84.0 for t in texts)


@pytest.mark.parametrize(
    "kind,content,expected",
    [
        (BarcodeType.EAN13, "590123412345", 13),
        (BarcodeType.EAN13, "59012341234570", 13),
        (BarcodeType.EAN8, "9638507", 8),
        (BarcodeType.EAN8, "", 8),
    ],
)
def test_length_mismatch(kind: BarcodeType, content: str, expected: int) -> None:
    cfg = RenderConfig(include_ean_text=True)
    commands, issue = ean_overlay(kind, content, 10, cfg, (1150, 600))
    assert commands == []
    assert isinstance(issue, ContentLengthMismatchError)
    assert issue.expected == expected
    assert issue.actual == len(content)


def test_non_ean_kind_yields_nothing() -> None:
    commands, issue = ean_overlay(BarcodeType.CODE39, "ABC", 10, RenderConfig(), (100, 100))
    assert commands == []
    assert issue is None
