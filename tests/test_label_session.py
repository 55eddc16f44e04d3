"""
Tests for the label session handler.
"""

import asyncio
import pytest
from datetime import date, datetime
from io import BytesIO
from PIL import Image

from label_service.handlers.label_session_handler import LabelSession
from label_service.label_generation import ExportPipeline, LabelRasterizer
from label_service.label_generation.layout import LabelRenderer
from label_service.models.label_record import (
    LabelSize,
    LabelType,
    ReadOnlyFieldError,
    UnknownFieldError,
)


class TestLabelSession:
    """Tests for editing the current label."""

    def test_start_mounts_layout(self, label_session, sample_record):
        """Test a started session has a live layout."""
        assert label_session.layout is not None
        assert label_session.layout == LabelRenderer().render(sample_record, "outer")

    def test_default_session(self):
        """Test a session created without arguments."""
        session = LabelSession()

        assert session.layout is None
        assert session.size is LabelSize.OUTER
        assert session.label_type is LabelType.SUBSTRATE
        assert len(session.record.hu_number) == 19
        assert session.record.hu_number[7:11] == session.record.date_code

    def test_set_field(self, label_session):
        """Test editing a field refreshes the layout."""
        label_session.set_field("poNumber", "PO999")

        assert label_session.record.po_number == "PO999"
        assert "|PO999|" in label_session.layout.qr_payload

    def test_set_field_by_attribute_name(self, label_session):
        """Test snake_case names are accepted."""
        label_session.set_field("po_line", "20")

        assert label_session.record.po_line == "20"

    def test_set_field_none(self, label_session):
        """Test clearing a field stores an empty string."""
        label_session.set_field("mpn", None)

        assert label_session.record.mpn == ""

    @pytest.mark.parametrize("name", ["huNumber", "dateCode", "vendorCode", "expiryDate", "supplierName"])
    def test_read_only_fields(self, label_session, name):
        """Test generator-owned and fixed fields cannot be edited."""
        before = label_session.record.model_copy()

        with pytest.raises(ReadOnlyFieldError):
            label_session.set_field(name, "X")

        assert label_session.record == before

    def test_unknown_field(self, label_session):
        """Test unknown fields are rejected."""
        with pytest.raises(UnknownFieldError):
            label_session.set_field("colour", "red")

    def test_refresh_hu_number(self, label_session):
        """Test HU refresh uses the current date code and clock."""
        hu_number = label_session.refresh_hu_number(now=datetime(2025, 4, 29, 11, 0, 0))

        assert hu_number == "11100002518V3000594"
        assert label_session.record.hu_number == hu_number
        assert hu_number in label_session.layout.qr_payload

    def test_refresh_date_code(self, label_session):
        """Test date code refresh leaves the HU number alone."""
        hu_number = label_session.record.hu_number

        yyww = label_session.refresh_date_code(today=date(2025, 1, 1))

        assert yyww == "2501"
        assert label_session.record.date_code == "2501"
        assert label_session.record.hu_number == hu_number

    def test_select_size(self, label_session):
        """Test switching to the inner label."""
        label_session.select_size("inner")

        assert label_session.size is LabelSize.INNER
        assert label_session.layout.width_px == 298

    def test_unmounted_edits_do_not_render(self, label_session):
        """Test edits while unmounted leave no layout."""
        label_session.unmount()
        label_session.set_field("poNumber", "PO999")

        assert label_session.layout is None

    def test_qr_payload(self, label_session):
        """Test the payload follows the record."""
        assert label_session.qr_payload().startswith("SDUC064G|")
        assert label_session.qr_payload().count("|") == 19

    def test_snapshot(self, label_session):
        """Test snapshot uses external field names."""
        snapshot = label_session.snapshot()

        assert snapshot["record"]["sandiskPN"] == "SDUC064G"
        assert snapshot["size"] == "outer"
        assert snapshot["label_type"] == "substrate"
        assert snapshot["mounted"] is True
        assert snapshot["is_exporting"] is False

    def test_preview_png(self, label_session):
        """Test live preview."""
        png = label_session.preview_png()

        assert Image.open(BytesIO(png)).size == (576, 310)

    def test_preview_mounts_if_needed(self, label_session):
        """Test preview of an unmounted session renders first."""
        label_session.unmount()

        label_session.preview_png()

        assert label_session.layout is not None

    @pytest.mark.asyncio
    async def test_export(self, label_session):
        """Test export named after the HU number."""
        result = await label_session.export()

        assert result.succeeded
        assert result.file_name == f"Label_{label_session.record.hu_number}.pdf"

    @pytest.mark.asyncio
    async def test_export_unmounted(self, label_session):
        """Test export without a live layout."""
        label_session.unmount()

        result = await label_session.export()

        assert result.error_code == "RENDER_UNAVAILABLE"
        assert not label_session.pipeline.is_busy

    def test_set_numeric_field(self, label_session):
        """Test numbers are stored as text."""
        label_session.set_field("quantity", 75)

        assert label_session.record.quantity == "75"
        assert "|75|" in label_session.qr_payload()


class RecordingRasterizer(LabelRasterizer):
    """Rasterizer that remembers the payload of each captured layout."""

    def __init__(self):
        super().__init__(scale=1)
        self.payloads = []

    def rasterize(self, layout, scale=None):
        self.payloads.append(layout.qr_payload)
        return super().rasterize(layout, scale)


class TestExportSettleDelay:
    """Tests for edits made while an export waits to capture."""

    @pytest.fixture
    def slow_session(self, sample_record, tmp_path):
        rasterizer = RecordingRasterizer()
        pipeline = ExportPipeline(export_dir=tmp_path, settle_delay_ms=100, rasterizer=rasterizer)
        return LabelSession.start(record=sample_record, rasterizer=rasterizer, pipeline=pipeline)

    @pytest.mark.asyncio
    async def test_edit_during_delay_is_captured(self, slow_session):
        """Test a field set during the delay reaches the PDF."""
        task = asyncio.create_task(slow_session.export())
        await asyncio.sleep(0.01)
        slow_session.set_field("poNumber", "PO-LATE")

        result = await task

        assert result.succeeded
        assert "|PO-LATE|" in slow_session.pipeline.rasterizer.payloads[-1]

    @pytest.mark.asyncio
    async def test_hu_refresh_during_delay_names_file(self, slow_session):
        """Test the file is named after the HU number current at capture."""
        task = asyncio.create_task(slow_session.export())
        await asyncio.sleep(0.01)
        slow_session.refresh_hu_number(now=datetime(2025, 4, 29, 11, 0, 0))

        result = await task

        assert result.file_name == "Label_11100002518V3000594.pdf"

    @pytest.mark.asyncio
    async def test_unmount_during_delay(self, slow_session):
        """Test unmounting while waiting reports the label as not ready."""
        task = asyncio.create_task(slow_session.export())
        await asyncio.sleep(0.01)
        slow_session.unmount()

        result = await task

        assert result.error_code == "RENDER_UNAVAILABLE"
        assert not slow_session.pipeline.is_busy
