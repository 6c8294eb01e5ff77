"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel


class IdentityRecord(BaseModel):
    """All fields of an identity card; missing values are empty strings."""

    cnp: str = ""
    nume: str = ""
    prenume: str = ""
    cetatenie: str = ""
    locul_nasterii: str = ""
    domiciliu: str = ""
    data_nasterii: str = ""
    sex: str = ""
    emis_de: str = ""
    data_emiterii: str = ""
    data_expirarii: str = ""
    serie: str = ""
    numar: str = ""


class TextExtractionRequest(BaseModel):
    """Request body for extracting fields from already recognized text."""

    text: str


class ExtractionResponse(BaseModel):
    """Response schema for an extraction request."""

    success: bool
    document_id: str
    fields: IdentityRecord
    sources: dict[str, str]
    completeness: float
    raw_text: str
    ocr_confidence: float | None = None
    processing_time_ms: float


class BatchItemResponse(BaseModel):
    """Response schema for a single item in a batch extraction."""

    filename: str
    result: ExtractionResponse | None = None
    error: str | None = None


class BatchExtractionResponse(BaseModel):
    """Response schema for batch extraction of multiple images."""

    success: bool
    total_documents: int
    successful: int
    failed: int
    results: list[BatchItemResponse]


class FieldInfo(BaseModel):
    """Description of one extracted field."""

    name: str
    description: str


class FieldsResponse(BaseModel):
    """Response schema listing the extracted fields."""

    fields: list[FieldInfo]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
