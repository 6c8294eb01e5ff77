"""Tests for the capitalized-word fallback name extractor."""

from src.extraction.fallback import FallbackNameExtractor
from src.extraction.fields import empty_record
from src.utils.config import ExtractionConfig


class TestCandidates:
    """Tests for name candidate selection."""

    def setup_method(self) -> None:
        self.extractor = FallbackNameExtractor(["Carte", "Romania"])

    def test_capitalized_words_in_order(self) -> None:
        assert self.extractor.candidates("Popescu Ion") == ["Popescu", "Ion"]

    def test_denylisted_words_removed(self) -> None:
        text = "Carte de identitate Romania Popescu Ion"
        assert self.extractor.candidates(text) == ["Popescu", "Ion"]

    def test_denylist_is_case_insensitive(self) -> None:
        extractor = FallbackNameExtractor(["cluj"])
        assert extractor.candidates("Cluj Popescu") == ["Popescu"]

    def test_duplicates_removed(self) -> None:
        assert self.extractor.candidates("Ion Popescu Ion") == ["Ion", "Popescu"]

    def test_all_caps_and_lowercase_ignored(self) -> None:
        assert self.extractor.candidates("POPESCU ion I") == []

    def test_diacritics(self) -> None:
        assert self.extractor.candidates("Ștefan Țurcanu Ănescu") == [
            "Ștefan",
            "Țurcanu",
            "Ănescu",
        ]

    def test_word_with_inner_capital_ignored(self) -> None:
        assert self.extractor.candidates("McDonald") == []

    def test_place_names_outside_denylist_are_candidates(self) -> None:
        assert self.extractor.candidates("Brasov Popescu") == ["Brasov", "Popescu"]


class TestFill:
    """Tests for filling missing name fields."""

    def setup_method(self) -> None:
        self.extractor = FallbackNameExtractor([])

    def test_fills_both_names(self) -> None:
        record = empty_record()
        filled = self.extractor.fill(record, "Popescu Ion")
        assert record["nume"] == "Popescu"
        assert record["prenume"] == "Ion"
        assert filled == ["nume", "prenume"]

    def test_keeps_existing_surname(self) -> None:
        record = empty_record()
        record["nume"] = "POPESCU"
        filled = self.extractor.fill(record, "Gheorghe Vasile")
        assert record["nume"] == "POPESCU"
        assert record["prenume"] == "Vasile"
        assert filled == ["prenume"]

    def test_keeps_existing_given_name(self) -> None:
        record = empty_record()
        record["prenume"] = "ION"
        self.extractor.fill(record, "Popescu Vasile")
        assert record["nume"] == "Popescu"
        assert record["prenume"] == "ION"

    def test_single_candidate_fills_surname_only(self) -> None:
        record = empty_record()
        self.extractor.fill(record, "Popescu")
        assert record["nume"] == "Popescu"
        assert record["prenume"] == ""

    def test_no_candidates(self) -> None:
        record = empty_record()
        assert self.extractor.fill(record, "123 <<< ABC") == []
        assert record == empty_record()

    def test_nothing_to_fill(self) -> None:
        record = empty_record()
        record["nume"] = "A"
        record["prenume"] = "B"
        assert self.extractor.fill(record, "Popescu Ion") == []


class TestDefaultDenylist:
    """Tests for the configured template denylist."""

    def test_card_boilerplate_removed(self) -> None:
        extractor = FallbackNameExtractor(ExtractionConfig().fallback_denylist)
        text = "Nume/Nom/Last name Prenume/Prenom/First name Popescu Ion"
        assert extractor.candidates(text) == ["Popescu", "Ion"]

    def test_card_template_leaves_no_candidates(self, card_text: str) -> None:
        holder_lines = {"POPESCU", "ION", "Str.Memorandumului nr.28"}
        template = "\n".join(
            line for line in card_text.splitlines() if line not in holder_lines
        )
        extractor = FallbackNameExtractor(ExtractionConfig().fallback_denylist)
        assert extractor.candidates(template) == []

    def test_date_header_and_city_removed(self) -> None:
        extractor = FallbackNameExtractor(ExtractionConfig().fallback_denylist)
        text = "Data nasterii/Date of birth\nSPCLEP Cluj-Napoca\nPopescu Ion"
        assert extractor.candidates(text) == ["Popescu", "Ion"]
