"""
Label session handler.
Owns the current label record, the selected size and the mounted layout,
and exposes the "Refresh HU" and "Save as PDF" actions.
"""

from datetime import date, datetime

from label_service.config import settings
from label_service.label_generation import (
    ExportPipeline,
    LabelLayout,
    LabelRasterizer,
    LabelRenderer,
    build_qr_payload,
    date_code,
    generate_hu_number,
)
from label_service.models.common import ExportResult
from label_service.models.label_record import (
    LabelRecord,
    LabelSize,
    LabelType,
    ReadOnlyFieldError,
    create_initial_record,
    field_alias,
    is_read_only,
    resolve_field_name,
)
from label_service.logger import get_logger

logger = get_logger(__name__)


class LabelSession:
    """Single-operator label editing session."""

    def __init__(
        self,
        record: LabelRecord | None = None,
        size: LabelSize | str | None = None,
        label_type: LabelType | str | None = None,
        renderer: LabelRenderer | None = None,
        rasterizer: LabelRasterizer | None = None,
        pipeline: ExportPipeline | None = None
    ):
        self.record = record or create_initial_record()
        self.size = LabelSize(size or settings.default_label_size)
        self.label_type = LabelType(label_type or settings.default_label_type)
        self.renderer = renderer or LabelRenderer()
        self.rasterizer = rasterizer or LabelRasterizer()
        self.pipeline = pipeline or ExportPipeline(rasterizer=self.rasterizer)
        self.layout: LabelLayout | None = None

        logger.info("Label session started", extra={
            "hu_number": self.record.hu_number,
            "date_code": self.record.date_code,
            "size": self.size.value
        })

    @classmethod
    def start(cls, **kwargs) -> "LabelSession":
        """Create a session with its layout already mounted."""
        session = cls(**kwargs)
        session.mount()
        return session

    # =============================================================================
    # Layout
    # =============================================================================
    def mount(self) -> LabelLayout:
        """Render the current record and keep it as the live layout."""
        self.layout = self.renderer.render(self.record, self.size, self.label_type)
        return self.layout

    def unmount(self) -> None:
        self.layout = None

    def _refresh_layout(self) -> None:
        if self.layout is not None:
            self.mount()

    def select_size(self, size: LabelSize | str) -> None:
        self.size = LabelSize(size)
        self._refresh_layout()

    # =============================================================================
    # Record
    # =============================================================================
    def set_field(self, name: str, value: str | int | float | None, force: bool = False) -> None:
        """
        Set one record field.

        Args:
            name: camelCase or snake_case field name
            value: New value (None stores an empty string, numbers their text)
            force: Allow writing read-only fields (generators only)

        Raises:
            UnknownFieldError: If the field does not exist
            ReadOnlyFieldError: If the field is read-only and force is False
        """
        attr = resolve_field_name(name)
        if not force and is_read_only(attr):
            raise ReadOnlyFieldError(f"Field is read-only: {field_alias(attr)}")

        setattr(self.record, attr, value)
        self._refresh_layout()

    def refresh_hu_number(self, now: datetime | None = None) -> str:
        """Regenerate the HU number from the current date code and clock."""
        hu_number = generate_hu_number(self.record.date_code, now=now)
        self.set_field("huNumber", hu_number, force=True)
        return hu_number

    def refresh_date_code(self, today: date | None = None) -> str:
        """Recompute the date code. The HU number keeps its old date code."""
        yyww = date_code(today)
        self.set_field("dateCode", yyww, force=True)
        return yyww

    def qr_payload(self) -> str:
        return build_qr_payload(self.record, self.label_type)

    def snapshot(self) -> dict:
        return {
            "record": self.record.model_dump(by_alias=True),
            "size": self.size.value,
            "label_type": self.label_type.value,
            "mounted": self.layout is not None,
            "is_exporting": self.pipeline.is_busy
        }

    # =============================================================================
    # Output
    # =============================================================================
    def preview_png(self, scale: int = 1) -> bytes:
        """Live preview of the current layout as PNG."""
        layout = self.layout or self.mount()
        return self.rasterizer.to_png(layout, scale)

    async def export(self) -> ExportResult:
        """
        Export the mounted layout as a PDF named after the HU number.

        Layout and HU number are read when the capture starts, after the
        settle delay, so edits made in the meantime are included.
        """
        return await self.pipeline.export(lambda: self.layout, lambda: self.record.hu_number)
