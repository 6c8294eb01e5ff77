"""Field-level accuracy evaluation for identity card extraction.

Compares extracted records against labeled ground truth and computes
precision, recall, F1 and exact-match accuracy per field.
"""

import csv
import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from src.utils.logger import get_logger

logger = get_logger(__name__)

_WHITESPACE = re.compile(r"\s+")


@dataclass
class FieldMetrics:
    """Precision, recall, F1, and accuracy metrics for a single field.

    An empty prediction counts as a false negative; a non-empty wrong
    prediction as a false positive.
    """

    field_name: str
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    total: int = 0

    @property
    def precision(self) -> float:
        denom = self.true_positives + self.false_positives
        return self.true_positives / denom if denom else 0.0

    @property
    def recall(self) -> float:
        denom = self.true_positives + self.false_negatives
        return self.true_positives / denom if denom else 0.0

    @property
    def f1(self) -> float:
        p, r = self.precision, self.recall
        return 2 * p * r / (p + r) if p + r else 0.0

    @property
    def accuracy(self) -> float:
        return self.true_positives / self.total if self.total else 0.0


@dataclass
class BenchmarkResult:
    """Aggregated benchmark results across all documents and fields."""

    total_documents: int
    successful_documents: int
    overall_accuracy: float
    overall_f1: float
    field_metrics: dict[str, FieldMetrics]
    errors: list[str] = field(default_factory=list)


def normalize_value(value: object) -> str:
    """Casefold a value and collapse internal whitespace for comparison."""
    return _WHITESPACE.sub(" ", str(value)).strip().casefold()


class Evaluator:
    """Evaluates extracted records against ground truth labels.

    Only fields with a non-empty expected value are scored, so partially
    labeled documents can be used.
    """

    def evaluate(
        self,
        predictions: dict[str, dict[str, str]],
        ground_truth: dict[str, dict[str, str]],
    ) -> BenchmarkResult:
        """Compare predictions against ground truth and compute metrics.

        Args:
            predictions: Mapping of filename to extracted record.
            ground_truth: Mapping of filename to expected field values.

        Returns:
            Aggregated benchmark results with per-field metrics.
        """
        field_metrics: dict[str, FieldMetrics] = {}
        errors: list[str] = []
        missing_count = 0

        for filename, expected in ground_truth.items():
            predicted = predictions.get(filename)
            if predicted is None:
                errors.append(f"Missing prediction for {filename}")
                missing_count += 1
                predicted = {}

            for field_name, expected_value in expected.items():
                if not normalize_value(expected_value or ""):
                    continue
                metrics = field_metrics.setdefault(field_name, FieldMetrics(field_name))
                metrics.total += 1

                pred_value = normalize_value(predicted.get(field_name, ""))
                if not pred_value:
                    metrics.false_negatives += 1
                elif pred_value == normalize_value(expected_value):
                    metrics.true_positives += 1
                else:
                    metrics.false_positives += 1

        scored = [m for m in field_metrics.values() if m.total > 0]
        result = BenchmarkResult(
            total_documents=len(ground_truth),
            successful_documents=len(ground_truth) - missing_count,
            overall_accuracy=(
                sum(m.accuracy for m in scored) / len(scored) if scored else 0.0
            ),
            overall_f1=sum(m.f1 for m in scored) / len(scored) if scored else 0.0,
            field_metrics=field_metrics,
            errors=errors,
        )
        logger.info(
            "Evaluated %d documents: accuracy %.2f, F1 %.3f",
            result.total_documents,
            result.overall_accuracy,
            result.overall_f1,
        )
        return result

    def generate_report(
        self, result: BenchmarkResult, output_path: Path | None = None
    ) -> str:
        """Generate a human-readable benchmark report.

        Args:
            result: Benchmark results to format.
            output_path: Optional path to write the report file.

        Returns:
            Formatted report string.
        """
        lines = [
            "=" * 64,
            "EXTRACTION BENCHMARK",
            "=" * 64,
            f"Documents:         {result.total_documents}",
            f"With predictions:  {result.successful_documents}",
            f"Mean accuracy:     {result.overall_accuracy:.2%}",
            f"Mean F1:           {result.overall_f1:.3f}",
            "",
            f"{'Field':<16} {'Precision':>10} {'Recall':>10} {'F1':>8} "
            f"{'Accuracy':>10} {'N':>5}",
            "-" * 64,
        ]
        for name, m in sorted(result.field_metrics.items()):
            lines.append(
                f"{name:<16} {m.precision:>10.2%} {m.recall:>10.2%} "
                f"{m.f1:>8.3f} {m.accuracy:>10.2%} {m.total:>5}"
            )
        lines.append("=" * 64)

        if result.errors:
            lines.append("Errors:")
            lines.extend(f"  - {error}" for error in result.errors)

        report = "\n".join(lines)

        if output_path:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(report, encoding="utf-8")
            logger.info("Report written to %s", output_path)

        return report


def load_ground_truth(path: Path) -> dict[str, dict[str, str]]:
    """Load ground truth labels from a JSON or CSV file.

    JSON format: ``{"filename": {"field": "value", ...}, ...}``
    CSV format: rows with a ``filename`` column and field value columns;
    empty cells are treated as unlabeled.

    Args:
        path: Path to the ground truth file.

    Returns:
        Mapping of filename to field-value pairs.

    Raises:
        ValueError: If the file format is not supported.
    """
    if path.suffix == ".json":
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    if path.suffix == ".csv":
        gt: dict[str, dict[str, str]] = {}
        with open(path, encoding="utf-8", newline="") as f:
            for row in csv.DictReader(f):
                filename = row.pop("filename")
                gt[filename] = {k: v for k, v in row.items() if v}
        return gt

    raise ValueError(f"Unsupported ground truth format: {path.suffix}")
