"""
PDF label documents.
Places a rasterized label on a page at its true physical size.
"""

import io
from PIL import Image
from reportlab.lib.pagesizes import letter, A4
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from reportlab.lib.utils import ImageReader

from label_service.config import settings
from label_service.label_generation.layout import get_preset
from label_service.models.label_record import LabelSize
from label_service.logger import get_logger

logger = get_logger(__name__)

PAGE_SIZES = {
    "A4": A4,
    "letter": letter,
}


class PDFLabelGenerator:
    """Generates single-page PDFs holding one label image."""

    def __init__(
        self,
        page_format: str | None = None,
        offset_in: float | None = None,
        jpeg_quality: int | None = None
    ):
        self.page_size = PAGE_SIZES[page_format or settings.page_format]
        self.offset = (settings.page_offset_in if offset_in is None else offset_in) * inch
        self.jpeg_quality = jpeg_quality or settings.jpeg_quality

    def placement(self, size: LabelSize | str) -> tuple[float, float, float, float]:
        """
        Image rectangle for a label size, in points.

        The label sits at the page offset from the top-left corner;
        reportlab measures y from the bottom edge.

        Returns:
            (x, y, width, height) with y of the image's bottom edge
        """
        preset = get_preset(size)
        width = preset.width_in * inch
        height = preset.height_in * inch
        x = self.offset
        y = self.page_size[1] - self.offset - height
        return x, y, width, height

    def encode_image(self, image: Image.Image) -> bytes:
        """Encode the label bitmap as JPEG."""
        buffer = io.BytesIO()
        image.convert("RGB").save(buffer, format="JPEG", quality=self.jpeg_quality)
        buffer.seek(0)
        return buffer.getvalue()

    def generate_label_document(
        self,
        image: Image.Image,
        size: LabelSize | str,
        title: str | None = None
    ) -> bytes:
        """
        Generate a PDF with one label image.

        The image is stretched to the physical size of the label,
        whatever its pixel dimensions.

        Args:
            image: Rasterized label
            size: outer (6" x 3.23") or inner (3.1" x 1.6")
            title: Document title

        Returns:
            PDF bytes

        Page layout:
        +---------------------------+
        |  0.5"                     |
        |0.5"+--------------+       |
        |    |    label     |       |
        |    +--------------+       |
        |                           |
        +---------------------------+
        """
        jpeg_bytes = self.encode_image(image)

        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=self.page_size)
        if title:
            c.setTitle(title)

        x, y, width, height = self.placement(size)
        c.drawImage(ImageReader(io.BytesIO(jpeg_bytes)), x, y, width, height)

        c.save()
        buffer.seek(0)

        logger.info("Label PDF generated", extra={
            "size": LabelSize(size).value,
            "image_pixels": image.size,
            "width_in": width / inch,
            "height_in": height / inch
        })

        return buffer.getvalue()
