"""
Pydantic models for handling-unit label records.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class LabelSize(str, Enum):
    """Physical label format."""

    OUTER = "outer"  # Outer box, 6" x 3.23"
    INNER = "inner"  # Inner reel, 3.1" x 1.6"


class LabelType(str, Enum):
    """Label variant. Substrate labels also surface rev/num."""

    SUBSTRATE = "substrate"
    NON_SUBSTRATE = "non-substrate"


class FieldPolicy(str, Enum):
    """Whether the data-entry surface may change a field."""

    EDITABLE = "editable"
    READ_ONLY = "read_only"


# Fixed values assigned once when a session starts
DEFAULT_SUPPLIER_NAME = "ELCOMP TRADING SDN BHD"
DEFAULT_EXPIRY_DATE = "31-12-50"  # DD-MM-YY
DEFAULT_COO = "JP"
VENDOR_CODE = "3000594"


class LabelFieldError(Exception):
    """Invalid access to a label record field."""
    pass


class UnknownFieldError(LabelFieldError):
    """Field name is not part of the label record."""
    pass


class ReadOnlyFieldError(LabelFieldError):
    """Field is owned by a generator or fixed by policy."""
    pass


def _print_date_today() -> str:
    return date.today().strftime("%d/%m/%Y")


class LabelRecord(BaseModel):
    """
    Flat set of label fields.

    Every field is free-form text and always holds a string. External
    (JSON) names are camelCase; attributes are snake_case.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid"
    )

    supplier_name: str = Field(DEFAULT_SUPPLIER_NAME, alias="supplierName")
    po_number: str = Field("", alias="poNumber")
    po_line: str = Field("", alias="poLine")
    hu_number: str = Field("", alias="huNumber", description="Handling Unit")
    ibd_number: str = Field("", alias="ibdNumber", description="Inbound Delivery")
    batch_number: str = Field("", alias="batchNumber")
    sandisk_pn: str = Field("", alias="sandiskPN", description="Part Number")
    quantity: str = Field("", alias="quantity")
    mpn: str = Field("", alias="mpn", description="Manufacturer Part Number")
    vendor_lot: str = Field("N / A", alias="vendorLot")
    expiry_date: str = Field(DEFAULT_EXPIRY_DATE, alias="expiryDate", description="DD-MM-YY")
    coo: str = Field(DEFAULT_COO, alias="coo", description="Country of Origin")
    date_code: str = Field("", alias="dateCode", description="YYWW")
    box_no: str = Field("1", alias="boxNo")
    print_date: str = Field(default_factory=_print_date_today, alias="printDate", description="DD/MM/YYYY")

    # QR specific fields
    msl: str = Field("", alias="msl", description="Moisture Sensitivity Level")
    gr_date: str = Field("", alias="grDate", description="Goods Receipt date")
    vendor_code: str = Field(VENDOR_CODE, alias="vendorCode")
    plant_code: str = Field("C039", alias="plantCode")
    material_desc: str = Field("", alias="materialDesc")
    asn: str = Field("", alias="asn", description="Advance Shipment Notice")

    # Substrate only fields
    rev: str = Field("", alias="rev")
    num: str = Field("", alias="num")

    @field_validator("*", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float, Decimal)):
            return str(value)
        return value


# Per-field mutability for the data-entry surface, keyed by external name
FIELD_POLICY: dict[str, FieldPolicy] = {
    info.alias: FieldPolicy.EDITABLE for info in LabelRecord.model_fields.values()
}
FIELD_POLICY.update({
    "supplierName": FieldPolicy.READ_ONLY,
    "huNumber": FieldPolicy.READ_ONLY,
    "dateCode": FieldPolicy.READ_ONLY,
    "expiryDate": FieldPolicy.READ_ONLY,
    "vendorCode": FieldPolicy.READ_ONLY,
})

_ALIAS_TO_ATTR = {info.alias: name for name, info in LabelRecord.model_fields.items()}


def resolve_field_name(name: str) -> str:
    """
    Map an external or attribute field name to the record attribute.

    Raises:
        UnknownFieldError: If the name is not a label field
    """
    if name in _ALIAS_TO_ATTR:
        return _ALIAS_TO_ATTR[name]
    if name in LabelRecord.model_fields:
        return name
    raise UnknownFieldError(f"Unknown label field: {name}")


def field_alias(attr: str) -> str:
    """External name for a record attribute."""
    return LabelRecord.model_fields[attr].alias


def is_read_only(name: str) -> bool:
    return FIELD_POLICY[field_alias(resolve_field_name(name))] is FieldPolicy.READ_ONLY


def create_initial_record(now: datetime | None = None) -> LabelRecord:
    """
    Build the record for a new session.

    Applies the fixed defaults, then derives the date code and the
    first HU number from the same clock reading.

    Args:
        now: Session start time (defaults to local now)

    Returns:
        Fully populated LabelRecord
    """
    # Imported here: label_generation depends on this module
    from label_service.label_generation.date_code import date_code
    from label_service.label_generation.identifier import generate_hu_number

    now = now or datetime.now()
    yyww = date_code(now)

    return LabelRecord(
        supplier_name=DEFAULT_SUPPLIER_NAME,
        vendor_code=VENDOR_CODE,
        expiry_date=DEFAULT_EXPIRY_DATE,
        coo=DEFAULT_COO,
        print_date=now.strftime("%d/%m/%Y"),
        date_code=yyww,
        hu_number=generate_hu_number(yyww, now=now),
    )
