"""PDF text extraction wrapper.

This module provides a clean abstraction over the PDF libraries, making it
easy to swap extraction backends without affecting the dialect parsers.
pypdf is the default backend because it keeps the rendered line breaks
the row scanners depend on; Unstructured.io can be selected instead.
"""

import io
import logging
from pathlib import Path
from typing import Any

from pypdf import PdfReader, PdfWriter

from statement_pipeline.core.config import settings
from statement_pipeline.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def partition_pdf(*args, **kwargs):
    """Lazily import and call Unstructured's PDF partitioner.

    Kept as a module-level symbol so tests can patch
    `statement_pipeline.parsers.extractor.partition_pdf` without importing
    heavy dependencies at process start.
    """
    from unstructured.partition.pdf import partition_pdf as _partition_pdf

    return _partition_pdf(*args, **kwargs)


class PDFExtractor:
    """Turns a statement PDF into a single text string.

    No semantic interpretation happens here: the output is the document's
    text with line breaks as rendered, pages joined by newlines.

    Example:
        >>> extractor = PDFExtractor()
        >>> text = extractor.extract_text("/tmp/uploads/statement.pdf")
    """

    def __init__(
        self,
        backend: str | None = None,
        strategy: str | None = None,
        layout_mode: bool | None = None,
    ):
        """Initialize the PDF extractor.

        Args:
            backend: "pypdf" (default) or "unstructured"
            strategy: Unstructured strategy - "fast", "hi_res", "ocr_only" or "auto"
            layout_mode: Use pypdf's layout extraction, which keeps column spacing
        """
        self.backend = backend or settings.EXTRACTION_BACKEND
        self.strategy = strategy or settings.UNSTRUCTURED_STRATEGY
        self.layout_mode = settings.PYPDF_LAYOUT_MODE if layout_mode is None else layout_mode

    def extract_text(self, path: str | Path, password: str | None = None) -> str:
        """Extract the text of a PDF file on disk.

        Args:
            path: Location of the PDF
            password: Optional password for encrypted PDFs

        Returns:
            Full text content of the PDF

        Raises:
            ExtractionError: If the file is unreadable or not a valid PDF
        """
        pdf_path = Path(path)
        try:
            pdf_bytes = pdf_path.read_bytes()
        except OSError as e:
            raise ExtractionError(
                "PARSE_005", {"path": str(pdf_path), "reason": type(e).__name__}
            ) from e

        return self.extract_text_from_bytes(pdf_bytes, password=password)

    def extract_text_from_bytes(self, pdf_bytes: bytes, password: str | None = None) -> str:
        """Extract text from in-memory PDF content.

        Raises:
            ExtractionError: If the bytes are empty, not a PDF, locked, or textless
        """
        if not pdf_bytes:
            raise ExtractionError("PARSE_002", {"reason": "empty_file"})

        if b"%PDF" not in pdf_bytes[:1024]:
            raise ExtractionError("PARSE_002", {"reason": "missing_pdf_header"})

        normalized_password = password.strip() if isinstance(password, str) else None
        if normalized_password == "":
            normalized_password = None

        reader = self._open_reader(pdf_bytes, normalized_password)

        if self.backend == "unstructured":
            text = self._extract_with_unstructured(reader)
        else:
            text = self._extract_with_pypdf(reader)

        if not text.strip():
            raise ExtractionError("PARSE_006", {"pages": len(reader.pages)})

        logger.debug("Extracted %d characters from %d pages", len(text), len(reader.pages))
        return text

    def _open_reader(self, pdf_bytes: bytes, password: str | None) -> PdfReader:
        """Open (and decrypt, when needed) a PDF with pypdf."""
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
        except Exception as e:
            raise ExtractionError("PARSE_002", {"reason": type(e).__name__}) from e

        if reader.is_encrypted:
            # Some PDFs are encrypted but use an empty user password.
            try:
                ok = reader.decrypt(password or "")
            except Exception as e:
                raise ExtractionError("PARSE_002", {"reason": type(e).__name__}) from e
            if not ok:
                if not password:
                    raise ExtractionError("PARSE_003")
                raise ExtractionError("PARSE_004")

        return reader

    def _extract_with_pypdf(self, reader: PdfReader) -> str:
        texts = []
        try:
            for page in reader.pages:
                # Blank pages have no content stream to lay out
                if page.get_contents() is None:
                    continue
                if self.layout_mode:
                    texts.append(page.extract_text(extraction_mode="layout") or "")
                else:
                    texts.append(page.extract_text() or "")
        except Exception as e:
            raise ExtractionError("PARSE_002", {"reason": type(e).__name__}) from e
        return "\n".join(texts)

    def _extract_with_unstructured(self, reader: PdfReader) -> str:
        # Re-write the (possibly decrypted) document so Unstructured never
        # needs the password.
        writer = PdfWriter()
        for page in reader.pages:
            writer.add_page(page)
        buffer = io.BytesIO()
        writer.write(buffer)
        buffer.seek(0)

        try:
            elements = partition_pdf(
                file=buffer,
                strategy=self.strategy,
                include_page_breaks=True,      # Helps with multi-page statements
                infer_table_structure=False,   # Row scanners want plain lines
                extract_images_in_pdf=False,   # Skip images for security/speed
            )
        except Exception as e:
            raise ExtractionError("PARSE_002", {"reason": type(e).__name__}) from e

        return self.get_full_text(elements)

    def get_full_text(self, elements: list[Any]) -> str:
        """Concatenate all element text into a single string.

        Args:
            elements: List of Element objects from Unstructured

        Returns:
            Full text content of the PDF
        """
        return "\n".join(str(element) for element in elements if str(element))
