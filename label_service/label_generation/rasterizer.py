"""
Bitmap rendering of label layouts with Pillow.
"""

import io
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from label_service.config import settings
from label_service.label_generation.barcode_generator import BarcodeGenerator
from label_service.label_generation.layout import (
    NO_DATA_COLOR,
    NO_DATA_TEXT,
    BarcodeNode,
    BoxNode,
    LabeledTextNode,
    LabelLayout,
    QRNode,
    RuleNode,
    TextNode,
)
from label_service.label_generation.qr_generator import QRGenerator
from label_service.logger import get_logger

logger = get_logger(__name__)

ELLIPSIS = "..."


@lru_cache(maxsize=64)
def load_font(name: str, size: int) -> ImageFont.ImageFont:
    """Load a TrueType font, falling back to Pillow's bundled font."""
    try:
        return ImageFont.truetype(name, size)
    except OSError:
        logger.warning("Font not found, using default font", extra={
            "font": name,
            "size": size
        })
        return ImageFont.load_default(size=size)


class LabelRasterizer:
    """Draws a LabelLayout onto an RGB bitmap at a supersampling scale."""

    def __init__(
        self,
        scale: int | None = None,
        font_regular: str | None = None,
        font_bold: str | None = None
    ):
        self.scale = scale or settings.raster_scale
        self.font_regular = font_regular or settings.font_regular
        self.font_bold = font_bold or settings.font_bold
        self.qr_generator = QRGenerator()
        self.barcode_generator = BarcodeGenerator()

    def rasterize(self, layout: LabelLayout, scale: int | None = None) -> Image.Image:
        """
        Render a layout to a bitmap.

        Args:
            layout: Rendered label layout
            scale: Pixels per layout pixel (defaults to the configured factor)

        Returns:
            RGB image of (width_px * scale) x (height_px * scale)
        """
        s = scale or self.scale
        image = Image.new("RGB", (layout.width_px * s, layout.height_px * s), "white")
        draw = ImageDraw.Draw(image)

        for node in layout.nodes:
            if isinstance(node, BoxNode):
                self._draw_box(draw, node, s)
            elif isinstance(node, RuleNode):
                self._draw_rule(draw, node, s)
            elif isinstance(node, TextNode):
                self._draw_text(draw, node, s)
            elif isinstance(node, LabeledTextNode):
                self._draw_labeled_text(draw, node, s)
            elif isinstance(node, BarcodeNode):
                self._draw_barcode(draw, node, s)
            elif isinstance(node, QRNode):
                self._draw_qr(image, node, s)

        logger.debug("Layout rasterized", extra={
            "size": layout.size.value,
            "scale": s,
            "pixels": image.size
        })

        return image

    def to_png(self, layout: LabelLayout, scale: int | None = None) -> bytes:
        """Render a layout and encode it as PNG."""
        image = self.rasterize(layout, scale)

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        buffer.seek(0)

        return buffer.getvalue()

    def _font(self, size: float, scale: int, bold: bool = False) -> ImageFont.ImageFont:
        name = self.font_bold if bold else self.font_regular
        return load_font(name, max(1, round(size * scale)))

    @staticmethod
    def _fit(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.ImageFont, max_width: float) -> str:
        """Clip text with an ellipsis so it fits max_width."""
        if draw.textlength(text, font=font) <= max_width:
            return text
        while text and draw.textlength(text + ELLIPSIS, font=font) > max_width:
            text = text[:-1]
        return text + ELLIPSIS if text else ""

    def _draw_box(self, draw: ImageDraw.ImageDraw, node: BoxNode, s: int) -> None:
        draw.rectangle(
            [node.x * s, node.y * s, (node.x + node.width) * s - 1, (node.y + node.height) * s - 1],
            outline=node.color,
            width=round(node.border_width * s)
        )

    def _draw_rule(self, draw: ImageDraw.ImageDraw, node: RuleNode, s: int) -> None:
        draw.line(
            [(node.x0 * s, node.y0 * s), (node.x1 * s, node.y1 * s)],
            fill=node.color,
            width=max(1, round(node.width * s))
        )

    def _draw_text(self, draw: ImageDraw.ImageDraw, node: TextNode, s: int) -> None:
        if not node.text:
            return

        font = self._font(node.font_size, s, node.bold)
        width = node.width * s
        text = self._fit(draw, node.text, font, width)
        text_width = draw.textlength(text, font=font)

        x = node.x * s
        if node.align == "center":
            x += (width - text_width) / 2
        elif node.align == "right":
            x += width - text_width
        y = node.y * s

        draw.text((x, y), text, fill=node.color, font=font)

        if node.underline:
            underline_y = y + (node.font_size + 1) * s
            draw.line([(x, underline_y), (x + text_width, underline_y)], fill=node.color, width=max(1, s // 2))

    def _draw_labeled_text(self, draw: ImageDraw.ImageDraw, node: LabeledTextNode, s: int) -> None:
        caption_font = self._font(node.font_size, s, bold=True)
        value_font = self._font(node.font_size, s, bold=node.value_bold)
        x = node.x * s
        y = node.y * s
        width = node.width * s

        caption = self._fit(draw, node.caption, caption_font, width)
        draw.text((x, y), caption, fill="black", font=caption_font)
        caption_width = draw.textlength(caption, font=caption_font) + 2 * s

        if not node.value:
            return

        value = self._fit(draw, node.value, value_font, max(0, width - caption_width))
        if node.spread:
            value_x = x + width - draw.textlength(value, font=value_font)
        else:
            value_x = x + caption_width
        draw.text((value_x, y), value, fill="black", font=value_font)

    def _draw_barcode(self, draw: ImageDraw.ImageDraw, node: BarcodeNode, s: int) -> None:
        modules = self.barcode_generator.encode(node.value)
        if modules is None:
            font = self._font(7, s)
            draw.text((node.x * s, node.y * s), NO_DATA_TEXT, fill=NO_DATA_COLOR, font=font)
            return

        # Shrink the module width when the symbol would overflow its cell
        module_width = min(node.module_width * s, node.width * s / len(modules))
        self.barcode_generator.draw(draw, modules, node.x * s, node.y * s, module_width, node.bar_height * s)

        if node.show_text and node.font_size:
            font = self._font(node.font_size, s)
            text = self._fit(draw, node.value, font, node.width * s)
            draw.text((node.x * s, (node.y + node.bar_height + 2) * s), text, fill="black", font=font)

    def _draw_qr(self, image: Image.Image, node: QRNode, s: int) -> None:
        qr_image = self.qr_generator.make_qr_image(node.payload, round(node.size * s))
        image.paste(qr_image, (round(node.x * s), round(node.y * s)))
