"""Shared test fixtures for the identity card extraction test suite."""

import io
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

SAMPLE_CARD_TEXT = """ROMANIA ROUMANIE ROMANIA
CARTE DE IDENTITATE
IDENTITY CARD
SERIA RX NR 123456
CNP 1900101123456
Data nasterii/Date of birth
01.01.1990
Nume/Nom/Last name
POPESCU
Prenume/Prenom/First name
ION
Cetatenie/Nationalite/Nationality
Romana / ROU
Sex/Sexe/Sex
M
Loc nastere/Lieu de naissance/Place of birth
Jud.CJ Mun.Cluj-Napoca
Domiciliu/Adresse/Address
Jud.CJ Mun.Cluj-Napoca
Str.Memorandumului nr.28
Emisa de/Delivree par/Issued by
SPCLEP Cluj-Napoca
Valabilitate/Validite/Validity
15.03.2015-01.01.2025
IDROUPOPESCU<<ION<<<<<<<<<<<<<<<<<<<<<<<
RX123456<4ROU9001015M2501014123456
"""


@pytest.fixture
def card_text() -> str:
    """OCR text of a complete, cleanly recognized identity card."""
    return SAMPLE_CARD_TEXT


@pytest.fixture
def sample_image() -> np.ndarray:
    """Create a simple synthetic grayscale test image."""
    image = np.zeros((200, 300), dtype=np.uint8)
    image[50:150, 50:250] = 255
    return image


@pytest.fixture
def sample_color_image() -> np.ndarray:
    """Create a simple synthetic RGB test image."""
    image = np.zeros((200, 300, 3), dtype=np.uint8)
    image[50:150, 50:250] = (255, 255, 255)
    return image


@pytest.fixture
def png_bytes() -> bytes:
    """A small PNG image encoded to bytes."""
    buf = io.BytesIO()
    Image.fromarray(np.full((60, 120, 3), 255, dtype=np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent
