"""Canonical field keys of an identity card record."""

from enum import StrEnum


class FieldKey(StrEnum):
    """The closed set of fields produced by the extraction engine."""

    CNP = "cnp"
    NUME = "nume"
    PRENUME = "prenume"
    CETATENIE = "cetatenie"
    LOCUL_NASTERII = "locul_nasterii"
    DOMICILIU = "domiciliu"
    DATA_NASTERII = "data_nasterii"
    SEX = "sex"
    EMIS_DE = "emis_de"
    DATA_EMITERII = "data_emiterii"
    DATA_EXPIRARII = "data_expirarii"
    SERIE = "serie"
    NUMAR = "numar"


FIELD_DESCRIPTIONS: dict[FieldKey, str] = {
    FieldKey.CNP: "Personal numeric code (13 digits)",
    FieldKey.NUME: "Surname",
    FieldKey.PRENUME: "Given name",
    FieldKey.CETATENIE: "Citizenship",
    FieldKey.LOCUL_NASTERII: "Place of birth",
    FieldKey.DOMICILIU: "Domicile address",
    FieldKey.DATA_NASTERII: "Birth date (DD.MM.YYYY)",
    FieldKey.SEX: "Sex (M or F)",
    FieldKey.EMIS_DE: "Issuing authority",
    FieldKey.DATA_EMITERII: "Issue date (DD.MM.YYYY)",
    FieldKey.DATA_EXPIRARII: "Expiry date (DD.MM.YYYY)",
    FieldKey.SERIE: "Document series",
    FieldKey.NUMAR: "Document number",
}


def empty_record() -> dict[str, str]:
    """Return a record holding every field key mapped to an empty string."""
    return {key.value: "" for key in FieldKey}
