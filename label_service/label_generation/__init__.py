"""
Label generation package: date codes, HU numbers, QR payloads, layouts and PDF export.
"""

from label_service.label_generation.date_code import date_code, iso_week_number
from label_service.label_generation.identifier import generate_hu_number
from label_service.label_generation.payload import build_qr_payload
from label_service.label_generation.qr_generator import QRGenerator
from label_service.label_generation.barcode_generator import BarcodeGenerator
from label_service.label_generation.layout import LabelLayout, LabelRenderer
from label_service.label_generation.rasterizer import LabelRasterizer
from label_service.label_generation.pdf_layout import PDFLabelGenerator
from label_service.label_generation.export_pipeline import ExportPipeline

__all__ = [
    "date_code",
    "iso_week_number",
    "generate_hu_number",
    "build_qr_payload",
    "QRGenerator",
    "BarcodeGenerator",
    "LabelLayout",
    "LabelRenderer",
    "LabelRasterizer",
    "PDFLabelGenerator",
    "ExportPipeline",
]
