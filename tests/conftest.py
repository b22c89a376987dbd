"""
Pytest fixtures and configuration for text-correction tests.
"""

import base64
import json

import pytest
from pathlib import Path

from docx import Document

from zh_text_correction.config import ServiceConfig
from zh_text_correction.models import CanonicalError


@pytest.fixture
def sample_text() -> str:
    """Original text with one typo in an idiom."""
    return "他足不初户地在家学习。"


@pytest.fixture
def sample_correction_data() -> dict:
    """Category-keyed correction data as decoded from the vendor."""
    return {
        "char": [[1, "足不初户", "足不出户", "别字"]],
        "word": [],
        "punc": [],
    }


@pytest.fixture
def vendor_envelope():
    """Build a full vendor response around decoded correction data."""
    def _build(data, encode: bool = False) -> dict:
        text = json.dumps(data, ensure_ascii=False)
        if encode:
            text = base64.b64encode(text.encode("utf-8")).decode("ascii")
        return {
            "header": {"code": 0, "message": "success", "sid": "ase000test"},
            "payload": {"result": {"compress": "raw", "encoding": "utf8", "format": "json", "text": text}},
        }
    return _build


@pytest.fixture
def service_config() -> ServiceConfig:
    """Service config with dummy credentials."""
    return ServiceConfig(app_id="test-app", api_secret="test-secret", api_key="test-key")


@pytest.fixture
def sample_docx(tmp_path: Path) -> Path:
    """Create a sample Word document."""
    docx_path = tmp_path / "sample.docx"
    doc = Document()
    doc.add_paragraph("第一段：他足不初户地在家学习。")
    doc.add_paragraph("第二段：今天天气很好。")
    doc.save(str(docx_path))
    return docx_path


@pytest.fixture
def sample_txt(tmp_path: Path) -> Path:
    """Create a sample UTF-8 text file."""
    txt_path = tmp_path / "sample.txt"
    txt_path.write_text("他足不初户地在家学习。", encoding="utf-8")
    return txt_path


@pytest.fixture
def make_error():
    """Build a CanonicalError with sensible defaults."""
    def _make(position, original, corrected, category="char", error_id=None, **kwargs):
        return CanonicalError(
            category=category,
            position=position,
            original=original,
            corrected=corrected,
            length=kwargs.pop("length", len(original)),
            description=kwargs.pop("description", "desc"),
            error_id=error_id or f"{category}-{position}",
            **kwargs,
        )
    return _make
