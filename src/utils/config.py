"""Configuration management for the identity card extraction service.

Loads and validates YAML configuration with sensible defaults
for preprocessing, OCR, field extraction, and the upload API.
"""

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# Label synonyms per field (Romanian / French / English, as printed on the card).
_DEFAULT_LABELS: dict[str, list[str]] = {
    "nume": [r"nume\b", r"nom\b", r"last\s*name\b"],
    "prenume": [r"prenume\b", r"pr[eé]nom\b", r"first\s*name\b"],
    "locul_nasterii": [
        r"loc(ul)?\s*(de\s*)?na[sșş]ter(e|ii)\b",
        r"lieu\s*de\s*naissance\b",
        r"place\s*of\s*birth\b",
    ],
    "domiciliu": [r"domiciliu\b", r"adresse\b", r"address\b"],
    "emis_de": [
        r"emis[aă]?\s*de\b",
        r"d[eé]livr[eé]e?\s*par\b",
        r"issued\s*by\b",
    ],
}

# Labels of fields that are not resolved by proximity but still mark the
# start of another field's block.
_DEFAULT_BOUNDARY_LABELS: list[str] = [
    r"cnp\b",
    r"cet[aă][tțţ]enie\b",
    r"nationalit[eé]\b",
    r"nationality\b",
    r"sex[e]?\b",
    r"valabilitate\b",
    r"validit[eé]\b",
    r"validity\b",
    r"seria\b",
    r"carte\s*de\s*identitate\b",
    r"identity\s*card\b",
    r"rom[aâ]nia\b",
]

_DEFAULT_DENYLIST: list[str] = [
    "Romania",
    "România",
    "Roumanie",
    "Română",
    "Romana",
    "Carte",
    "Identitate",
    "Identite",
    "Identité",
    "Identity",
    "Card",
    "Data",
    "Date",
    "Nume",
    "Nom",
    "Last",
    "Name",
    "Prenume",
    "Prenom",
    "Prénom",
    "First",
    "Sex",
    "Sexe",
    "Loc",
    "Locul",
    "Nastere",
    "Naștere",
    "Lieu",
    "Naissance",
    "Place",
    "Birth",
    "Domiciliu",
    "Adresse",
    "Address",
    "Emisa",
    "Emisă",
    "Delivree",
    "Délivrée",
    "Par",
    "Issued",
    "Valabilitate",
    "Validite",
    "Validité",
    "Validity",
    "Cetatenie",
    "Cetățenie",
    "Nationalite",
    "Nationalité",
    "Nationality",
    "Seria",
    "Nr",
    "Jud",
    "Mun",
    "Str",
    "Sat",
    "Com",
    "Bl",
    "Sc",
    "Et",
    "Ap",
    "Sector",
    "Bucuresti",
    "București",
    "Cluj",
    "Napoca",
    "Spclep",
    "Politia",
    "Poliția",
]


class PreprocessingConfig(BaseModel):
    """Configuration for image preprocessing before OCR."""

    enabled: bool = True
    upscale_min_width: int = 1200
    denoise_method: str = "bilateral"
    binarize_method: str = "otsu"


class OCRConfig(BaseModel):
    """Configuration for Tesseract OCR engine."""

    tesseract_cmd: str | None = None
    default_lang: str = "ron+eng"
    psm: int = 6


class ExtractionConfig(BaseModel):
    """Configuration for identity card field extraction."""

    label_window: int = 4
    min_value_length: int = 2
    citizenship_value: str = "ROMÂNĂ"
    labels: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in _DEFAULT_LABELS.items()}
    )
    boundary_labels: list[str] = Field(
        default_factory=lambda: list(_DEFAULT_BOUNDARY_LABELS)
    )
    fallback_denylist: list[str] = Field(
        default_factory=lambda: list(_DEFAULT_DENYLIST)
    )


class APIConfig(BaseModel):
    """Configuration for the upload API."""

    allowed_content_types: list[str] = Field(
        default_factory=lambda: ["image/png", "image/jpeg", "image/webp", "image/tiff"]
    )
    max_upload_bytes: int = 10 * 1024 * 1024
    min_text_length: int = 10
    host: str = "0.0.0.0"
    port: int = 8000


class AppConfig(BaseModel):
    """Top-level application configuration."""

    preprocessing: PreprocessingConfig = Field(default_factory=PreprocessingConfig)
    ocr: OCRConfig = Field(default_factory=OCRConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    log_level: str = "INFO"


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.
            Defaults to configs/config.yaml.

    Returns:
        Validated application configuration.
    """
    if path is None:
        path = Path("configs/config.yaml")

    if path.exists():
        logger.info("Loading configuration from %s", path)
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        return AppConfig(**raw)

    logger.info("No config file found at %s, using defaults", path)
    return AppConfig()
