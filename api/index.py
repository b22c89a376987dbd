"""
FastAPI service for Chinese text correction.

Wraps the iFlytek correction API and the reconciliation engine as a REST
API: text and document correction, offline processing of saved vendor
responses, and a two-text comparison tool.
"""

import logging
from datetime import datetime
from typing import Any, Iterator, Literal

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from zh_text_correction import __version__
from zh_text_correction.config import CorrectionConfig, ServiceConfig
from zh_text_correction.content_sources import ContentExtractionError, extract_text_from_bytes
from zh_text_correction.diff_engine import compare_texts
from zh_text_correction.pipeline import InvalidInputError, process_result
from zh_text_correction.text_preprocess import preprocess_text, sanitize_input
from zh_text_correction.xunfei_client import (
    XunfeiAPIError,
    XunfeiClient,
    XunfeiClientError,
    XunfeiConfigurationError,
    XunfeiNetworkError,
    create_xunfei_client,
)

logger = logging.getLogger(__name__)

SERVICE_CONFIG = ServiceConfig.from_env()

app = FastAPI(
    title="Chinese Text Correction API",
    description="Text and document correction backed by the iFlytek correction API",
    version=__version__,
)

# Enable CORS for all origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CorrectTextRequest(BaseModel):
    """Request model for text correction."""
    text: str = Field(..., description="Text to correct (at most 2000 characters)")
    include_html: bool = Field(False, description="Include highlighted HTML for both sides")


class ProcessResultRequest(BaseModel):
    """Request model for reconciling a saved vendor response."""
    vendor_result: Any = Field(None, description="Vendor response or bare correction data")
    original_text: str = Field(..., description="Text the vendor response refers to")
    include_html: bool = Field(True, description="Include highlighted HTML for both sides")


class CompareRequest(BaseModel):
    """Request model for the text comparison tool."""
    left: str = ""
    right: str = ""
    ignore_case: bool = True
    ignore_whitespace: bool = False
    strategy: Literal["lookahead", "lcs"] = "lookahead"


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    message: str
    version: str
    timestamp: str


def get_client() -> Iterator[XunfeiClient]:
    """Provide a vendor client for one request."""
    try:
        client = create_xunfei_client(SERVICE_CONFIG)
    except XunfeiConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    try:
        yield client
    finally:
        client.close()


def _client_error_to_http(error: XunfeiClientError) -> HTTPException:
    if isinstance(error, XunfeiNetworkError):
        return HTTPException(status_code=504, detail=str(error))
    if isinstance(error, XunfeiAPIError):
        return HTTPException(status_code=502, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def _validate_text(text: str) -> str:
    text = sanitize_input(text)
    if not text:
        raise HTTPException(status_code=400, detail="Text must not be empty")
    if len(text) > SERVICE_CONFIG.max_text_length:
        raise HTTPException(
            status_code=400,
            detail=f"Text must not exceed {SERVICE_CONFIG.max_text_length} characters",
        )
    return text


def _correct(client: XunfeiClient, text: str, include_html: bool) -> dict:
    prepared = preprocess_text(text, SERVICE_CONFIG.max_text_length)
    try:
        response = client.correct_text(prepared.text)
    except XunfeiClientError as e:
        logger.error(f"Correction request failed: {e}")
        raise _client_error_to_http(e)

    result = process_result(response, prepared.text)
    return {
        "success": True,
        "warnings": prepared.warnings,
        "result": response,
        "processed": result.to_dict(include_html=include_html),
    }


@app.get("/")
def root():
    """Service information."""
    return {
        "success": True,
        "message": "Chinese text correction service",
        "version": __version__,
        "timestamp": datetime.now().isoformat(),
        "endpoints": {
            "health": "/api/health",
            "status": "/api/status",
            "correct_text": "/api/correct-text",
            "correct_file": "/api/correct-file",
            "process_result": "/api/process-result",
            "compare": "/api/compare",
        },
        "documentation": "/docs",
    }


@app.get("/api/health", response_model=HealthResponse)
def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        message="Text correction service is running",
        version=__version__,
        timestamp=datetime.now().isoformat(),
    )


@app.get("/api/status")
def status():
    """Feature and configuration status."""
    return {
        "success": True,
        "message": "Text correction service is running",
        "features": {
            "text_correction": True,
            "file_upload": True,
            "supported_formats": list(SERVICE_CONFIG.allowed_extensions),
        },
        "credentials_configured": SERVICE_CONFIG.has_credentials,
        "max_text_length": SERVICE_CONFIG.max_text_length,
        "max_file_size": SERVICE_CONFIG.max_file_size,
    }


@app.post("/api/correct-text")
def correct_text(request: CorrectTextRequest, client: XunfeiClient = Depends(get_client)):
    """
    Correct a text.

    Returns the raw vendor response alongside the reconciled result
    (corrected text, errors, statistics and anomalies).
    """
    text = _validate_text(request.text)
    logger.info(f"Correcting text of {len(text)} characters")
    return _correct(client, text, request.include_html)


@app.post("/api/correct-file")
async def correct_file(
    file: UploadFile = File(..., description="Document to correct (.txt, .docx or .pdf)"),
    include_html: bool = Form(False),
    client: XunfeiClient = Depends(get_client),
):
    """
    Correct the text of an uploaded document.

    The extracted text must not exceed 2000 characters.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    extension = Path(file.filename).suffix.lower()
    if extension not in SERVICE_CONFIG.allowed_extensions:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{extension}', allowed: "
            + ", ".join(SERVICE_CONFIG.allowed_extensions),
        )

    data = await file.read()
    if len(data) > SERVICE_CONFIG.max_file_size:
        max_mb = SERVICE_CONFIG.max_file_size // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File must not exceed {max_mb}MB")
    if not data:
        raise HTTPException(status_code=400, detail="File is empty")

    try:
        text = extract_text_from_bytes(data, file.filename)
    except ContentExtractionError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if len(text) > SERVICE_CONFIG.max_text_length:
        raise HTTPException(
            status_code=400,
            detail=f"File text must not exceed {SERVICE_CONFIG.max_text_length} characters",
        )

    text = _validate_text(text)
    logger.info(f"Correcting {file.filename} ({len(text)} characters)")
    response = await run_in_threadpool(_correct, client, text, include_html)
    response["originalText"] = text
    response["filename"] = file.filename
    return response


@app.post("/api/process-result")
def process_vendor_result(request: ProcessResultRequest):
    """Reconcile a saved vendor response with its original text."""
    try:
        result = process_result(request.vendor_result, request.original_text, CorrectionConfig())
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "processed": result.to_dict(include_html=request.include_html)}


@app.post("/api/compare")
def compare(request: CompareRequest):
    """Line and character diff of two texts."""
    comparison = compare_texts(
        request.left,
        request.right,
        ignore_case=request.ignore_case,
        ignore_whitespace=request.ignore_whitespace,
        config=CorrectionConfig(line_alignment=request.strategy),
    )
    return {"success": True, **comparison.to_dict()}


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.environ.get("PORT", "8000")))
