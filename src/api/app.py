"""FastAPI application for the identity card extraction API.

Provides REST endpoints for extracting card fields from uploaded
images or from already recognized text, batch processing, field
listing, and health checks.
"""

import shutil
import time
import uuid
from pathlib import Path
from typing import Annotated

from fastapi import FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from src import __version__
from src.extraction.engine import ExtractionResult, IdentityCardExtractor
from src.extraction.fields import FIELD_DESCRIPTIONS
from src.ocr.recognizer import RecognitionError, TextRecognizer
from src.utils.config import APIConfig, load_config
from src.utils.logger import get_logger

from .schemas import (
    BatchExtractionResponse,
    BatchItemResponse,
    ExtractionResponse,
    FieldInfo,
    FieldsResponse,
    HealthResponse,
    IdentityRecord,
    TextExtractionRequest,
)

logger = get_logger(__name__)

_config_path: Path | None = None

app = FastAPI(
    title="Identity Card Extraction API",
    description="Extract structured fields from scanned identity cards",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def configure(config_path: Path | None) -> None:
    """Set the YAML file the request components are built from.

    Args:
        config_path: Configuration file, or ``None`` for the default.
    """
    global _config_path
    _config_path = config_path


def _get_components() -> tuple[TextRecognizer, IdentityCardExtractor, APIConfig]:
    """Initialize and return shared processing components.

    Returns:
        Tuple of (text_recognizer, card_extractor, api_config).
    """
    config = load_config(_config_path)
    return (
        TextRecognizer(config),
        IdentityCardExtractor(config.extraction),
        config.api,
    )


def _build_response(
    extraction: ExtractionResult,
    start_time: float,
    ocr_confidence: float | None = None,
) -> ExtractionResponse:
    return ExtractionResponse(
        success=True,
        document_id=str(uuid.uuid4()),
        fields=IdentityRecord(**extraction.record),
        sources=extraction.sources,
        completeness=extraction.completeness,
        raw_text=extraction.raw_text,
        ocr_confidence=ocr_confidence,
        processing_time_ms=(time.time() - start_time) * 1000,
    )


async def _extract_upload(
    file: UploadFile,
    recognizer: TextRecognizer,
    extractor: IdentityCardExtractor,
    api_config: APIConfig,
) -> ExtractionResponse:
    """Validate one upload, recognize its text and extract the card fields.

    The image is kept in memory only for the duration of the call.

    Raises:
        HTTPException: For every caller-visible failure.
    """
    start_time = time.time()
    filename = file.filename or "document"

    if file.content_type not in api_config.allowed_content_types:
        raise HTTPException(
            status_code=415,
            detail=f"Unsupported file type: {file.content_type}. "
            "Please upload a JPG, PNG, WEBP or TIFF image.",
        )

    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail=f"Uploaded file {filename} is empty")
    if len(content) > api_config.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File too large: {len(content)} bytes "
            f"(limit {api_config.max_upload_bytes})",
        )

    try:
        recognition = recognizer.recognize(content, filename)
    except RecognitionError as exc:
        logger.error("Recognition failed for %s: %s", filename, exc)
        raise HTTPException(
            status_code=503, detail=f"Text recognition unavailable: {exc}"
        ) from exc

    text = recognition.text
    if len(text.strip()) < api_config.min_text_length:
        raise HTTPException(
            status_code=422,
            detail="Too little text was recognized. "
            "Please upload a sharper, well lit photo of the card.",
        )

    extraction = extractor.extract(text)
    return _build_response(extraction, start_time, recognition.ocr_result.confidence)


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        tesseract_available=shutil.which("tesseract") is not None,
    )


@app.get("/fields", response_model=FieldsResponse)
async def list_fields() -> FieldsResponse:
    """List the fields returned for every card."""
    return FieldsResponse(
        fields=[
            FieldInfo(name=key.value, description=description)
            for key, description in FIELD_DESCRIPTIONS.items()
        ]
    )


@app.post("/extract", response_model=ExtractionResponse)
async def extract_document(
    file: Annotated[UploadFile | None, File()] = None,
) -> ExtractionResponse:
    """Extract identity card fields from an uploaded image.

    Args:
        file: Uploaded card image (PNG, JPEG, WEBP or TIFF).

    Returns:
        The extracted record with its per-field sources.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file was uploaded")

    try:
        recognizer, extractor, api_config = _get_components()
        return await _extract_upload(file, recognizer, extractor, api_config)
    except HTTPException:
        raise
    except Exception as exc:
        logger.error("Extraction failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@app.post("/extract/text", response_model=ExtractionResponse)
async def extract_text(request: TextExtractionRequest) -> ExtractionResponse:
    """Extract identity card fields from already recognized text."""
    start_time = time.time()
    _, extractor, _ = _get_components()
    return _build_response(extractor.extract(request.text), start_time)


@app.post("/extract/batch", response_model=BatchExtractionResponse)
async def extract_batch(
    files: Annotated[list[UploadFile], File(...)],
) -> BatchExtractionResponse:
    """Extract identity card fields from several uploaded images.

    Args:
        files: List of uploaded card images.

    Returns:
        Batch extraction results with per-file outcomes.
    """
    recognizer, extractor, api_config = _get_components()
    results: list[BatchItemResponse] = []
    successful = 0

    for file in files:
        filename = file.filename or "unknown"
        try:
            result = await _extract_upload(file, recognizer, extractor, api_config)
            results.append(BatchItemResponse(filename=filename, result=result))
            successful += 1
        except HTTPException as exc:
            results.append(BatchItemResponse(filename=filename, error=exc.detail))
        except Exception as exc:
            logger.error("Batch item %s failed: %s", filename, exc)
            results.append(BatchItemResponse(filename=filename, error=str(exc)))

    return BatchExtractionResponse(
        success=successful > 0,
        total_documents=len(files),
        successful=successful,
        failed=len(files) - successful,
        results=results,
    )
