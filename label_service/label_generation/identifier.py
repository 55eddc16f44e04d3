"""
Time-based handling unit (HU) number generation.
"""

from datetime import datetime

from label_service.models.label_record import VENDOR_CODE
from label_service.logger import get_logger

logger = get_logger(__name__)

HU_PREFIX = "1"
HU_SEPARATOR = "V"


def generate_hu_number(
    yyww: str,
    now: datetime | None = None,
    vendor_code: str = VENDOR_CODE
) -> str:
    """
    Generate an HU number from the wall clock.

    Format: 1 + HHmmss + YYWW + V + vendor code, e.g.
    1103045 2518 V 3000594 -> "11030452518V3000594" (19 characters).

    Two calls within the same second return the same number.

    Args:
        yyww: Current date code
        now: Time of generation (defaults to local now)
        vendor_code: Vendor code appended after the separator

    Returns:
        HU number string
    """
    now = now or datetime.now()
    running_num = f"{HU_PREFIX}{now:%H%M%S}"
    hu_number = f"{running_num}{yyww}{HU_SEPARATOR}{vendor_code}"

    logger.info("HU number generated", extra={
        "hu_number": hu_number,
        "date_code": yyww
    })

    return hu_number
