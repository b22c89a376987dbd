"""
Text extraction from uploaded or local documents.

Supported formats:
- Plain text (.txt, UTF-8 with optional BOM)
- Word documents (.docx, using python-docx)
- PDF (.pdf, using PyMuPDF)

Legacy binary Word files (.doc) are recognised but cannot be read.
"""

import io
import logging
from pathlib import Path
from typing import Union

import fitz  # PyMuPDF
from docx import Document

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".docx", ".pdf")


class ContentExtractionError(Exception):
    """Raised when text cannot be extracted from a file."""
    pass


def _extract_txt(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ContentExtractionError(f"Text file is not valid UTF-8: {e}")


def _extract_docx(data: bytes) -> str:
    try:
        doc = Document(io.BytesIO(data))
    except Exception as e:
        raise ContentExtractionError(f"Failed to open Word document: {e}")
    return "\n".join(paragraph.text for paragraph in doc.paragraphs)


def _extract_pdf(data: bytes) -> str:
    try:
        with fitz.open(stream=data, filetype="pdf") as pdf:
            pages = [page.get_text() for page in pdf]
    except Exception as e:
        raise ContentExtractionError(f"Failed to read PDF: {e}")
    return "\n".join(page.rstrip("\n") for page in pages)


_EXTRACTORS = {
    ".txt": _extract_txt,
    ".docx": _extract_docx,
    ".pdf": _extract_pdf,
}


def extract_text_from_bytes(data: bytes, filename: str) -> str:
    """
    Extract text from file contents.

    Args:
        data: Raw file bytes.
        filename: Original file name; its extension selects the parser.

    Returns:
        Extracted text.

    Raises:
        ContentExtractionError: If the format is unsupported or parsing fails.
    """
    extension = Path(filename).suffix.lower()
    if extension == ".doc":
        raise ContentExtractionError(
            "Legacy .doc files are not supported, save the document as .docx"
        )
    extractor = _EXTRACTORS.get(extension)
    if extractor is None:
        raise ContentExtractionError(
            f"Unsupported file type '{extension}', expected one of: "
            + ", ".join(SUPPORTED_EXTENSIONS)
        )

    text = extractor(data)
    logger.debug(f"Extracted {len(text)} characters from {filename}")
    return text


def extract_text_from_file(file_path: Union[str, Path]) -> str:
    """
    Extract text from a local file.

    Args:
        file_path: Path to a .txt, .docx or .pdf file.

    Returns:
        Extracted text.

    Raises:
        ContentExtractionError: If the file is missing, unsupported or unreadable.
    """
    path = Path(file_path)
    if not path.exists():
        raise ContentExtractionError(f"File not found: {file_path}")
    return extract_text_from_bytes(path.read_bytes(), path.name)
