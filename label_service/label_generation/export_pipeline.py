"""
Label export: rasterize a rendered layout, place it on a PDF page at
physical size, and write the file.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from label_service.config import settings
from label_service.label_generation.layout import LabelLayout
from label_service.label_generation.pdf_layout import PDFLabelGenerator
from label_service.label_generation.rasterizer import LabelRasterizer
from label_service.models.common import ExportResult
from label_service.logger import get_logger

logger = get_logger(__name__)

FILE_PREFIX = "Label"
PREVIEW_NAME = "Preview"
GENERIC_FAILURE_MESSAGE = "Failed to generate label PDF."

LayoutSource = Union[LabelLayout, Callable[[], Optional[LabelLayout]], None]
HUSource = Union[str, Callable[[], str]]


class LabelExportError(Exception):
    """Label export failed."""

    error_code = "EXPORT_FAILED"


class RenderUnavailableError(LabelExportError):
    """No rendered layout to capture."""

    error_code = "RENDER_UNAVAILABLE"


class RasterizationError(LabelExportError):
    """Failed to capture the layout as a bitmap."""

    error_code = "RASTERIZATION_FAILED"


class PersistenceError(LabelExportError):
    """Failed to build or write the PDF."""

    error_code = "PERSISTENCE_FAILED"


class ExportInProgressError(LabelExportError):
    """Another export is still running."""

    error_code = "EXPORT_IN_PROGRESS"


def build_file_name(hu_number: str) -> str:
    """
    File name for an exported label.

    Example:
        >>> build_file_name("11030452518V3000594")
        'Label_11030452518V3000594.pdf'
        >>> build_file_name("")
        'Label_Preview.pdf'
    """
    stem = hu_number.strip() or PREVIEW_NAME
    # Keep only characters that are safe in file names
    safe_stem = "".join(c if c.isalnum() or c in "._-" else "_" for c in stem)
    return f"{FILE_PREFIX}_{safe_stem[:200]}.pdf"


class ExportPipeline:
    """Turns a rendered layout into a persisted, print-ready PDF."""

    def __init__(
        self,
        export_dir: Path | str | None = None,
        settle_delay_ms: int | None = None,
        rasterizer: LabelRasterizer | None = None,
        pdf_generator: PDFLabelGenerator | None = None
    ):
        self.export_dir = Path(export_dir or settings.export_dir)
        if settle_delay_ms is None:
            self.settle_delay = settings.export_settle_delay_seconds
        else:
            self.settle_delay = settle_delay_ms / 1000
        self.rasterizer = rasterizer or LabelRasterizer()
        self.pdf_generator = pdf_generator or PDFLabelGenerator()
        self.is_busy = False

    async def export(
        self,
        layout: LayoutSource,
        hu_number: HUSource = ""
    ) -> ExportResult:
        """
        Export a rendered layout as a PDF file.

        Both arguments may be callables. They are resolved after the
        settle delay, so edits made while the export waits are captured.
        The label size, and with it the physical footprint on the page,
        comes from the layout. Failures never propagate: they come back
        as a failed result and no file is left behind.

        Args:
            layout: Rendered layout, a callable returning the current one,
                or None when nothing is mounted
            hu_number: HU number for the file name, or a callable returning it

        Returns:
            ExportResult with the file path on success
        """
        if self.is_busy:
            logger.warning("Export rejected, another export is running")
            return ExportResult(
                status="failed",
                error_code=ExportInProgressError.error_code,
                message="An export is already in progress."
            )

        self.is_busy = True
        size = None
        try:
            # Let pending record updates land before capture
            await asyncio.sleep(self.settle_delay)

            captured = self._resolve_layout(layout)
            size = captured.size.value
            hu = hu_number() if callable(hu_number) else hu_number
            path = await self._run(captured, hu or "")

        except RenderUnavailableError as e:
            logger.warning("Export aborted, no rendered label", extra={
                "error": str(e)
            })
            return ExportResult(
                status="failed",
                error_code=e.error_code,
                message="Label preview is not ready yet."
            )

        except LabelExportError as e:
            logger.error("Label export failed", extra={
                "size": size,
                "error_code": e.error_code,
                "error": str(e)
            }, exc_info=True)
            return ExportResult(
                status="failed",
                size=size,
                error_code=e.error_code,
                message=GENERIC_FAILURE_MESSAGE
            )

        finally:
            self.is_busy = False

        logger.info("Label exported", extra={
            "size": size,
            "hu_number": hu,
            "path": str(path)
        })

        return ExportResult(
            status="success",
            size=size,
            file_name=path.name,
            file_path=str(path)
        )

    @staticmethod
    def _resolve_layout(layout: LayoutSource) -> LabelLayout:
        if callable(layout):
            try:
                layout = layout()
            except Exception as e:
                raise RenderUnavailableError(f"Label layout could not be read: {e}") from e
        if layout is None:
            raise RenderUnavailableError("No label layout is mounted")
        return layout

    async def _run(self, layout: LabelLayout, hu_number: str) -> Path:
        try:
            image = await asyncio.to_thread(self.rasterizer.rasterize, layout)
        except Exception as e:
            raise RasterizationError(f"Rasterization failed: {e}") from e

        file_name = build_file_name(hu_number)
        try:
            pdf_bytes = await asyncio.to_thread(
                self.pdf_generator.generate_label_document,
                image,
                layout.size,
                file_name
            )
            return await asyncio.to_thread(self._persist, pdf_bytes, file_name)
        except Exception as e:
            raise PersistenceError(f"Saving {file_name} failed: {e}") from e

    def _persist(self, content: bytes, file_name: str) -> Path:
        """Write the file atomically: temp file in the same directory, then rename."""
        self.export_dir.mkdir(parents=True, exist_ok=True)
        target = self.export_dir / file_name

        fd, temp_path = tempfile.mkstemp(dir=self.export_dir, prefix=f".{file_name}.", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(temp_path, target)
        except Exception:
            Path(temp_path).unlink(missing_ok=True)
            raise

        return target
