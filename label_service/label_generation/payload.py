"""
QR payload serialization.
"""

from collections.abc import Mapping
from typing import Any

from label_service.models.label_record import LabelRecord, LabelType, resolve_field_name

PAYLOAD_SEPARATOR = "|"

# Fixed order of the scannable payload
QR_FIELD_ORDER = (
    "sandiskPN",
    "huNumber",
    "batchNumber",
    "mpn",
    "dateCode",
    "expiryDate",
    "coo",
    "msl",
    "ibdNumber",
    "grDate",
    "vendorCode",
    "plantCode",
    "materialDesc",
    "poNumber",
    "poLine",
    "quantity",
    "vendorLot",
    "asn",
)

# Substrate fields, appended for every label type
SUBSTRATE_FIELDS = ("rev", "num")


def _field_value(record: LabelRecord | Mapping[str, Any], name: str) -> str:
    if isinstance(record, LabelRecord):
        value = getattr(record, resolve_field_name(name))
    else:
        value = record.get(name)
        if value is None:
            value = record.get(resolve_field_name(name))
    if value is None:
        return ""
    return str(value).strip()


def build_qr_payload(
    record: LabelRecord | Mapping[str, Any],
    label_type: LabelType = LabelType.SUBSTRATE
) -> str:
    """
    Build the pipe-separated QR payload for a label.

    Rules:
    - 20 fields in fixed order, joined with "|" (always 19 separators)
    - Values are trimmed; missing or empty fields give empty segments ("||")
    - No escaping: field values must not contain "|"
    - rev and num are appended whatever the label type

    Args:
        record: LabelRecord, or a mapping keyed by camelCase or snake_case names
        label_type: Label variant (does not change the payload)

    Returns:
        Payload string

    Example:
        >>> build_qr_payload({"sandiskPN": "SDUC064G", "dateCode": "2518"})
        'SDUC064G||||2518|||||||||||||||'
    """
    names = QR_FIELD_ORDER + SUBSTRATE_FIELDS
    return PAYLOAD_SEPARATOR.join(_field_value(record, name) for name in names)
