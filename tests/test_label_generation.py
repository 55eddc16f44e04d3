"""
Tests for label generation (QR codes, barcodes and PDF layout).
"""

import pytest
from io import BytesIO
from PIL import Image, ImageDraw
from pypdf import PdfReader

from label_service.label_generation.qr_generator import QRGenerator
from label_service.label_generation.barcode_generator import BarcodeGenerator
from label_service.label_generation.pdf_layout import PDFLabelGenerator

PAYLOAD = "SDUC064G|11030452518V3000594|||2518|||||||||PO123|10|50||||"


class TestQRGenerator:
    """Tests for QR code generation."""

    def test_generate_payload_qr(self):
        """Test QR code PNG for a label payload."""
        generator = QRGenerator()

        qr_bytes = generator.generate_payload_qr(PAYLOAD)

        assert isinstance(qr_bytes, bytes)
        assert len(qr_bytes) > 0

        # Verify it's a valid PNG
        img = Image.open(BytesIO(qr_bytes))
        assert img.format == "PNG"
        assert img.size == (200, 200)  # Default size

    def test_qr_code_custom_size(self):
        """Test QR code with custom size."""
        qr_bytes = QRGenerator().generate_payload_qr(PAYLOAD, size=300)

        img = Image.open(BytesIO(qr_bytes))
        assert img.size == (300, 300)

    def test_make_qr_image(self):
        """Test in-memory QR image used when rasterizing labels."""
        img = QRGenerator().make_qr_image(PAYLOAD, 76)

        assert img.mode == "RGB"
        assert img.size == (76, 76)
        # No quiet zone: the top-left finder pattern starts at the corner
        assert img.getpixel((0, 0)) == (0, 0, 0)

    def test_empty_separators_only_payload(self):
        """Test a payload of only separators still encodes."""
        img = QRGenerator().make_qr_image("|" * 19, 36)

        assert img.size == (36, 36)


class TestBarcodeGenerator:
    """Tests for CODE128 encoding."""

    def test_encode_starts_with_code_b(self):
        """Test alphanumeric values use the Code B start symbol."""
        modules = BarcodeGenerator().encode("PO123")

        assert modules.startswith("11010010000")

    def test_encode_ends_with_stop(self):
        """Test every symbol ends with the stop pattern."""
        modules = BarcodeGenerator().encode("11030452518V3000594")

        assert modules.endswith("1100011101011")
        # 11 modules per symbol plus the 13-module stop
        assert (len(modules) - 13) % 11 == 0

    def test_encode_only_modules(self):
        """Test the pattern is made of bars and spaces."""
        modules = BarcodeGenerator().encode("B240518")

        assert set(modules) == {"0", "1"}
        assert modules[0] == "1"

    def test_encode_empty(self):
        """Test empty values have no barcode."""
        assert BarcodeGenerator().encode("") is None

    def test_encode_non_ascii(self):
        """Test values CODE128 cannot carry are rejected."""
        assert BarcodeGenerator().encode("Größe") is None

    def test_encode_untrimmed_value(self):
        """Test surrounding spaces are encoded, not dropped."""
        generator = BarcodeGenerator()

        assert generator.encode(" PO123 ") != generator.encode("PO123")

    def test_draw(self):
        """Test module runs become bars of the given width."""
        image = Image.new("RGB", (20, 20), "white")
        draw = ImageDraw.Draw(image)

        width = BarcodeGenerator().draw(draw, "1101", 0, 0, module_width=2, bar_height=10)

        assert width == 8
        assert image.getpixel((0, 0)) == (0, 0, 0)
        assert image.getpixel((3, 9)) == (0, 0, 0)
        assert image.getpixel((5, 5)) == (255, 255, 255)
        assert image.getpixel((7, 5)) == (0, 0, 0)
        assert image.getpixel((7, 10)) == (255, 255, 255)
        assert image.getpixel((9, 5)) == (255, 255, 255)


class TestPDFLabelGenerator:
    """Tests for PDF generation."""

    def test_outer_placement(self):
        """Test outer label rectangle is 6 x 3.23 inches at 0.5 inch from the top-left."""
        generator = PDFLabelGenerator(page_format="A4", offset_in=0.5)

        x, y, width, height = generator.placement("outer")

        assert x == pytest.approx(36)
        assert width == pytest.approx(432)
        assert height == pytest.approx(232.56)
        assert y + height == pytest.approx(841.89 - 36, abs=0.01)

    def test_inner_placement(self):
        """Test inner label rectangle is 3.1 x 1.6 inches."""
        generator = PDFLabelGenerator(page_format="letter", offset_in=0.5)

        x, y, width, height = generator.placement("inner")

        assert x == pytest.approx(36)
        assert width == pytest.approx(223.2)
        assert height == pytest.approx(115.2)
        assert y == pytest.approx(792 - 36 - 115.2)

    def test_generate_label_document(self):
        """Test single-page PDF with one image."""
        generator = PDFLabelGenerator(page_format="A4")
        image = Image.new("RGB", (1192, 616), "white")

        pdf_bytes = generator.generate_label_document(image, "inner", title="Label_Preview.pdf")

        assert isinstance(pdf_bytes, bytes)
        assert pdf_bytes.startswith(b"%PDF")

        reader = PdfReader(BytesIO(pdf_bytes))
        assert len(reader.pages) == 1
        assert float(reader.pages[0].mediabox.width) == pytest.approx(595.28, abs=0.01)
        assert len(reader.pages[0].images) == 1
        assert reader.metadata.title == "Label_Preview.pdf"

    def test_encode_image_is_jpeg(self):
        """Test label bitmap is embedded as JPEG."""
        jpeg = PDFLabelGenerator().encode_image(Image.new("RGB", (10, 10), "white"))

        assert Image.open(BytesIO(jpeg)).format == "JPEG"
