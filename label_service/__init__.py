"""
Handling-unit label service: date codes, HU numbers, QR payloads and
print-ready label PDFs.
"""

__version__ = "1.0.0"
