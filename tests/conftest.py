"""
Pytest configuration and fixtures.
"""

import pytest
from datetime import datetime
from fastapi.testclient import TestClient

from label_service.main import app
from label_service.handlers.label_session_handler import LabelSession
from label_service.label_generation import ExportPipeline, LabelRasterizer
from label_service.models.label_record import LabelRecord, create_initial_record
from label_service.routes.label_routes import get_label_session


@pytest.fixture
def fixed_now():
    """Tuesday 2025-04-29 10:30:45 (ISO week 18 of 2025)."""
    return datetime(2025, 4, 29, 10, 30, 45)


@pytest.fixture
def initial_record(fixed_now):
    """Record as created at session start."""
    return create_initial_record(now=fixed_now)


@pytest.fixture
def sample_record(initial_record):
    """Fully filled-in label record."""
    return initial_record.model_copy(update={
        "po_number": "4500123456",
        "po_line": "10",
        "ibd_number": "180012345",
        "batch_number": "B240518",
        "sandisk_pn": "SDUC064G",
        "quantity": "50",
        "mpn": "MX25L6433F",
        "msl": "3",
        "material_desc": "NAND SUBSTRATE",
        "asn": "ASN-7781",
        "rev": "A1",
        "num": "07"
    })


@pytest.fixture
def empty_record():
    """Record with every field blank."""
    return LabelRecord(**{name: "" for name in LabelRecord.model_fields})


@pytest.fixture
def export_pipeline(tmp_path):
    """Export pipeline writing into a temp dir without settle delay."""
    return ExportPipeline(
        export_dir=tmp_path / "exports",
        settle_delay_ms=0,
        rasterizer=LabelRasterizer(scale=2)
    )


@pytest.fixture
def label_session(sample_record, export_pipeline):
    """Mounted session over the sample record."""
    return LabelSession.start(record=sample_record, pipeline=export_pipeline)


@pytest.fixture
def client(label_session):
    """FastAPI test client bound to the test session."""
    app.dependency_overrides[get_label_session] = lambda: label_session
    yield TestClient(app)
    app.dependency_overrides.clear()
