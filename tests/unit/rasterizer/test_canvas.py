from typing import Any, List, Optional, Tuple
from unittest.mock import Mock, patch

import pytest
from PIL import Image

from barcode_raster.model.enums import BarcodeType, FontStyle
from barcode_raster.model.symbol import BarcodeSymbol
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
    DrawText,
    FillCanvas,
    FillRect,
    FontSpec,
    Layout,
)
from barcode_raster.rasterizer.config import RenderConfig
from barcode_raster.rasterizer.exceptions import FontNotFoundError
from barcode_raster.rasterizer.shape_layout import layout

PATTERN = "10110010110"


class TextlessCanvas(PillowCanvas):
    """Pillow canvas that ignores text, so only rectangles reach the image."""

    def draw_text(
        self, text: str, font: Any, color: Color, position: Tuple[float, float]
    ) -> None:
        return None


class RecordingCanvas:
    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.calls: List[Tuple[Any, ...]] = []

    def fill(self, color: Color) -> None:
        self.calls.append(("fill", color))

    def fill_rect(self, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
        self.calls.append(("rect", x0, y0, x1, y1, color))

    def draw_text(
        self, text: str, font: Any, color: Color, position: Tuple[float, float]
    ) -> None:
        self.calls.append(("text", text, font, color, position))

    def to_image(self) -> Image.Image:
        return Image.new("L", (self.width, self.height))


class StubFonts:
    def __init__(self) -> None:
        self.requests: List[Tuple[Optional[str], int, FontStyle]] = []

    def resolve(self, family: Optional[str], size: int, style: FontStyle) -> Any:
        self.requests.append((family, size, style))
        return f"font:{family}:{size}"


def _pixels(image: Image.Image) -> Any:
    return image.load()


class TestPillowCanvas:
    def test_starts_white_grayscale(self) -> None:
        canvas = PillowCanvas.create(4, 3)
        image = canvas.to_image()
        assert image.mode == "L"
        assert image.size == (4, 3)
        assert set(image.getdata()) == {255}

    def test_fill_rect_half_open(self) -> None:
        canvas = PillowCanvas(5, 5)
        canvas.fill_rect(1, 1, 3, 4, Color.INK)
        px = _pixels(canvas.to_image())
        assert px[1, 1] == 0 and px[2, 3] == 0
        assert px[3, 1] == 255
        assert px[1, 4] == 255
        assert px[0, 0] == 255

    def test_fill_rect_empty_is_noop(self) -> None:
        canvas = PillowCanvas(3, 3)
        canvas.fill_rect(2, 2, 2, 3, Color.INK)
        canvas.fill_rect(2, 2, 1, 1, Color.INK)
        assert set(canvas.to_image().getdata()) == {255}

    def test_fill(self) -> None:
        canvas = PillowCanvas(2, 2)
        canvas.fill(Color.INK)
        assert set(canvas.to_image().getdata()) == {0}

    def test_protocol(self) -> None:
        assert isinstance(PillowCanvas(1, 1), Canvas)
        assert isinstance(PillowFontProvider(), FontProvider)


class TestPillowFontProvider:
    def test_default_family(self) -> None:
        provider = PillowFontProvider()
        font = provider.resolve(None, 36)
        assert font is not None
        assert provider.resolve(None, 36) is font

    def test_unknown_family(self) -> None:
        with pytest.raises(FontNotFoundError) as exc:
            PillowFontProvider().resolve("NoSuchFontFamily-xyz", 20, FontStyle.BOLD)
        assert exc.value.family == "NoSuchFontFamily-xyz"
        assert exc.value.style is FontStyle.BOLD

    def test_candidates(self) -> None:
        regular = PillowFontProvider.candidates("DejaVuSans", FontStyle.REGULAR)
        assert regular[0] == "DejaVuSans"
        assert "DejaVuSans.ttf" in regular
        assert "DejaVuSans-Regular.otf" in regular
        bold = PillowFontProvider.candidates("DejaVuSans", FontStyle.BOLD)
        assert "DejaVuSans-Bold.ttf" in bold
        assert "DejaVuSans" not in bold

    def test_truetype_lookup_cached(self) -> None:
        sentinel = object()
        with patch(
            "barcode_raster.rasterizer.canvas.ImageFont.truetype",
            side_effect=[OSError("missing"), sentinel],
        ) as truetype:
            provider = PillowFontProvider()
            assert provider.resolve("Acme", 12) is sentinel
            assert provider.resolve("Acme", 12) is sentinel
        assert truetype.call_count == 2
        assert truetype.call_args_list[0].args == ("Acme", 12)
        assert truetype.call_args_list[1].args == ("Acme.ttf", 12)


class TestReplay:
    def test_commands_applied_in_order(self) -> None:
        font = FontSpec("Acme", 9)
        lay = Layout(
            width=10,
            height=10,
            commands=(
                FillCanvas(),
                FillRect(0, 0, 2, 2),
                DrawText("12", 1.0, 2.0, font),
                FillRect(1, 1, 2, 2, Color.BACKGROUND),
                DrawText("34", 3.0, 2.0, font),
            ),
        )
        canvas = RecordingCanvas(10, 10)
        fonts = StubFonts()
        assert replay(lay, canvas, fonts) is canvas
        assert canvas.calls == [
            ("fill", Color.BACKGROUND),
            ("rect", 0, 0, 2, 2, Color.INK),
            ("text", "12", "font:Acme:9", Color.INK, (1.0, 2.0)),
            ("rect", 1, 1, 2, 2, Color.BACKGROUND),
            ("text", "34", "font:Acme:9", Color.INK, (3.0, 2.0)),
        ]
        # resolved once per layout
        assert fonts.requests == [("Acme", 9, FontStyle.REGULAR)]

    def test_unknown_command(self) -> None:
        lay = Layout(width=1, height=1, commands=("bogus",))  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="Unknown draw command"):
            replay(lay, RecordingCanvas(1, 1), StubFonts())

    def test_font_errors_propagate(self) -> None:
        fonts = Mock()
        fonts.resolve.side_effect = FontNotFoundError("Acme", 9)
        lay = Layout(width=1, height=1, commands=(DrawText("1", 0, 0, FontSpec("Acme", 9)),))
        with pytest.raises(FontNotFoundError):
            replay(lay, RecordingCanvas(1, 1), fonts)


class TestPaintPixels:
    """Pixel-level checks of painted layouts."""

    def test_bar_scenario(self) -> None:
        sym = BarcodeSymbol.from_rows([PATTERN], kind=BarcodeType.CODE128, margin=2)
        lay = layout(sym, sym.metadata, RenderConfig())
        image = paint(lay).to_image()
        assert image.size == (150, 440)
        px = _pixels(image)
        ink_columns = {x for x in range(11) if px[(2 + x) * 10 + 5, 225] == 0}
        assert ink_columns == {0, 2, 3, 6, 8, 9}

    def test_pixel_centers_match_modules(self) -> None:
        sym = BarcodeSymbol.from_rows(["1100", "0110", "0011"], kind="qr", margin=1)
        ps = 3
        image = paint(layout(sym, sym.metadata, RenderConfig(pixel_size=ps))).to_image()
        px = _pixels(image)
        for y in range(sym.height):
            for x in range(sym.width):
                value = px[(sym.margin + x) * ps + ps // 2, (sym.margin + y) * ps + ps // 2]
                assert value == (0 if sym.at(x, y) else 255)

    def test_margin_is_white(self) -> None:
        sym = BarcodeSymbol.from_rows(["1" * 6] * 6, kind="qr", margin=2)
        ps = 2
        image = paint(layout(sym, sym.metadata, RenderConfig(pixel_size=ps))).to_image()
        px = _pixels(image)
        border = 2 * ps
        for y in range(image.height):
            for x in range(image.width):
                inside = border <= x < image.width - border and border <= y < image.height - border
                assert px[x, y] == (0 if inside else 255)

    def test_margin_is_white_1d(self) -> None:
        sym = BarcodeSymbol.from_rows(["1" * 6], kind=BarcodeType.CODE128, margin=2)
        ps = 2
        cfg = RenderConfig(pixel_size=ps, bar_height_1d=5)
        image = paint(layout(sym, sym.metadata, cfg)).to_image()
        assert image.size == (20, 18)
        px = _pixels(image)
        border = 2 * ps
        bar_bottom = (cfg.bar_height_1d + sym.margin) * ps
        for y in range(image.height):
            for x in range(image.width):
                inside = border <= x < image.width - border and border <= y < bar_bottom
                assert px[x, y] == (0 if inside else 255)

    @pytest.mark.parametrize("ps", [1, 2, 4, 10])
    @pytest.mark.parametrize(
        "kind,width,content",
        [
            (BarcodeType.EAN13, 95, "5901234123457"),
            (BarcodeType.EAN8, 67, "96385074"),
        ],
    )
    def test_ean_text_only_inside_wells(
        self, kind: BarcodeType, width: int, content: str, ps: int
    ) -> None:
        """Every pixel the digits touch is background in the bars-only image."""
        sym = BarcodeSymbol.from_rows(["1" * width], kind=kind, content=content, margin=10)
        lay = layout(sym, sym.metadata, RenderConfig(pixel_size=ps, include_ean_text=True))
        with_text = paint(lay).to_image().tobytes()
        bars_only = paint(lay, TextlessCanvas.create).to_image().tobytes()
        changed = [bar for text, bar in zip(with_text, bars_only) if text != bar]
        assert changed
        assert all(bar == 255 for bar in changed)

    def test_ean13_wells(self) -> None:
        sym = BarcodeSymbol.from_rows(
            ["1" * 95], kind=BarcodeType.EAN13, content="5901234123457", margin=10
        )
        ps = 2
        cfg = RenderConfig(pixel_size=ps, include_ean_text=True)
        image = paint(layout(sym, sym.metadata, cfg), TextlessCanvas.create).to_image()
        px = _pixels(image)
        assert image.size == (115 * ps, 60 * ps)
        well_y = 45 * ps
        bar_y = 30 * ps
        for module in (13, 30, 55, 59, 80, 101):
            assert px[module * ps, bar_y] == 0
            assert px[module * ps, well_y] == 255
        # guards keep their full length
        for module in (10, 11, 12, 56, 57, 58, 102, 103, 104):
            assert px[module * ps, well_y] == 0
        # bars stop at the bottom of the bar area outside the wells
        assert px[10 * ps, 50 * ps] == 255
