"""
QR code generation for label payloads.
"""

import io
import qrcode
from qrcode.image.pil import PilImage
from PIL import Image

from label_service.logger import get_logger

logger = get_logger(__name__)


class QRGenerator:
    """Generates QR codes for label payloads."""

    def __init__(self, error_correction: int = qrcode.constants.ERROR_CORRECT_M):
        self.error_correction = error_correction

    def make_qr_image(
        self,
        data: str,
        size: int,
        border: int = 0
    ) -> Image.Image:
        """
        Generate a square QR image for a data string.

        Args:
            data: Data to encode (pipe-separated label payload)
            size: Output edge length in pixels
            border: Quiet zone in QR modules

        Returns:
            RGB PIL image of size x size pixels
        """
        qr = qrcode.QRCode(
            version=None,  # Auto-determine version
            error_correction=self.error_correction,
            box_size=10,
            border=border
        )

        qr.add_data(data)
        qr.make(fit=True)

        img: PilImage = qr.make_image(fill_color="black", back_color="white")

        # Nearest keeps module edges sharp when scaling
        return img.resize((size, size), Image.Resampling.NEAREST).convert("RGB")

    def generate_payload_qr(
        self,
        payload: str,
        size: int = 200,
        border: int = 2
    ) -> bytes:
        """
        Generate a standalone QR code PNG for a label payload.

        Args:
            payload: Pipe-separated label payload
            size: QR code size in pixels
            border: Border size in QR modules

        Returns:
            PNG image bytes
        """
        logger.info("Generating payload QR code", extra={
            "payload_length": len(payload),
            "size": size
        })

        img = self.make_qr_image(payload, size, border)

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        buffer.seek(0)

        return buffer.getvalue()
