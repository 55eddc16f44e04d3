"""
CODE128 barcode encoding and drawing.
"""

from reportlab.graphics.barcode.code128 import Code128
from PIL import ImageDraw

from label_service.logger import get_logger

logger = get_logger(__name__)


class BarcodeGenerator:
    """Encodes field values as CODE128 and paints the bars with Pillow."""

    def encode(self, value: str) -> str | None:
        """
        Encode a value to its CODE128 module pattern.

        Args:
            value: Raw field value (not normalized)

        Returns:
            String of "1" (bar) and "0" (space) modules, or None when the
            value is empty or cannot be encoded

        Example:
            >>> BarcodeGenerator().encode("PO123")[:11]
            '11010010000'
        """
        if not value:
            return None

        symbol = Code128(value, quiet=0)
        symbol.validate()
        if not symbol.valid:
            # Characters outside ASCII would be silently dropped
            logger.warning("Value cannot be encoded as CODE128", extra={
                "value": value
            })
            return None

        try:
            symbol.encode()
            decomposed = symbol.decompose()
        except (KeyError, IndexError) as e:
            logger.warning("CODE128 encoding failed", extra={
                "value": value,
                "error": str(e)
            })
            return None

        # Uppercase letters are bars, lowercase are spaces; A=1 module wide
        modules = []
        for c in decomposed:
            if c.isupper():
                modules.append("1" * (ord(c) - ord("A") + 1))
            else:
                modules.append("0" * (ord(c) - ord("a") + 1))
        return "".join(modules)

    def draw(
        self,
        draw: ImageDraw.ImageDraw,
        modules: str,
        x: float,
        y: float,
        module_width: float,
        bar_height: float
    ) -> float:
        """
        Paint a module pattern as black bars.

        Args:
            draw: Target drawing context
            modules: Pattern returned by encode()
            x: Left edge in pixels
            y: Top edge in pixels
            module_width: Width of one module in pixels
            bar_height: Bar height in pixels

        Returns:
            Total barcode width in pixels
        """
        run_start = None
        for index, module in enumerate(modules + "0"):
            if module == "1" and run_start is None:
                run_start = index
            elif module != "1" and run_start is not None:
                x0 = round(x + run_start * module_width)
                x1 = round(x + index * module_width)
                # Rectangle end coordinates are inclusive
                draw.rectangle(
                    [x0, round(y), max(x0, x1 - 1), round(y + bar_height) - 1],
                    fill="black"
                )
                run_start = None

        return len(modules) * module_width
