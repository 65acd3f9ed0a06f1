"""Unit tests for the reportlab render sink."""

import pytest
from reportlab.pdfbase import pdfmetrics

from timeskwire.canvas import PdfCanvas
from timeskwire.errors import RenderLayoutError
from timeskwire.layout import Align, Line, Rectangle, Text


class TestPdfCanvas:
    """Tests for the PdfCanvas class."""

    def test_writes_pdf_on_exit(self, tmp_path):
        path = tmp_path / "report.pdf"
        with PdfCanvas(str(path), (180.0, 240.0)) as sink:
            sink.draw_all(
                [
                    Line(10.0, 10.0, 100.0, 10.0),
                    Rectangle(10.0, 20.0, 30.0, 10.0, (192, 0, 0)),
                    Text(10.0, 50.0, "left", 5.0),
                    Text(170.0, 50.0, "right", 5.0, Align.RIGHT),
                    Text(90.0, 60.0, "center", 10.0, Align.CENTER, (150, 0, 0)),
                ]
            )

        assert path.read_bytes().startswith(b"%PDF")

    def test_nothing_written_on_error(self, tmp_path):
        path = tmp_path / "report.pdf"
        with pytest.raises(RuntimeError):
            with PdfCanvas(str(path), (180.0, 240.0)):
                raise RuntimeError("boom")

        assert not path.exists()

    def test_measure_uses_font_metrics(self):
        sink = PdfCanvas("unused.pdf", (180.0, 240.0))
        expected = pdfmetrics.stringWidth("2024-01-01", "Helvetica-Bold", 10.0)
        assert sink.measure("2024-01-01", 10.0) == pytest.approx(expected)

    def test_longer_text_is_wider(self):
        sink = PdfCanvas("unused.pdf", (180.0, 240.0))
        assert sink.measure("wider text", 5.0) > sink.measure("text", 5.0)

    def test_unknown_instruction(self, tmp_path):
        with pytest.raises(RenderLayoutError):
            with PdfCanvas(str(tmp_path / "report.pdf"), (180.0, 240.0)) as sink:
                sink.draw("circle")

    def test_draw_outside_block(self):
        sink = PdfCanvas("unused.pdf", (180.0, 240.0))
        with pytest.raises(RenderLayoutError):
            sink.draw(Line(0.0, 0.0, 1.0, 1.0))

    @pytest.mark.parametrize("pagesize", [(0.0, 240.0), (180.0, 0.0), (-5.0, -5.0)])
    def test_non_positive_page(self, pagesize):
        with pytest.raises(RenderLayoutError):
            PdfCanvas("unused.pdf", pagesize)
