"""Command-line interface for identity card extraction.

Provides subcommands for extracting a single card image, processing a
folder of images into CSV, extracting from an OCR text dump, and
benchmarking extraction accuracy against labeled ground truth.
"""

import argparse
import csv
import json
import sys
import time
from pathlib import Path

from src.benchmark.evaluator import Evaluator, load_ground_truth
from src.extraction.engine import IdentityCardExtractor
from src.extraction.fields import FieldKey
from src.ocr.recognizer import TextRecognizer
from src.utils.config import AppConfig, load_config
from src.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

_IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp", ".tif", ".tiff")
_TEXT_EXTENSIONS = (".txt",)
_META_COLUMNS = [
    "filename",
    "status",
    "processing_time_s",
    "ocr_confidence",
    "completeness",
    "error",
]


def _find_documents(input_dir: Path, extensions: tuple[str, ...]) -> list[Path]:
    """Find files with the given extensions (any case) in a directory.

    Args:
        input_dir: Directory to scan.
        extensions: Lowercase extensions including the dot.

    Returns:
        Sorted list of matching file paths.
    """
    return sorted(
        p for p in input_dir.iterdir() if p.is_file() and p.suffix.lower() in extensions
    )


def _record_for_file(
    file_path: Path,
    recognizer: TextRecognizer | None,
    extractor: IdentityCardExtractor,
) -> tuple[dict[str, str], float | None]:
    """Extract the record of an image, or of a ``.txt`` OCR dump.

    Returns:
        The record and the OCR confidence (``None`` for text dumps).
    """
    if file_path.suffix.lower() in _TEXT_EXTENSIONS or recognizer is None:
        text = file_path.read_text(encoding="utf-8")
        return extractor.extract(text).record, None

    recognition = recognizer.recognize(file_path, file_path.name)
    record = extractor.extract(recognition.text).record
    return record, recognition.ocr_result.confidence


def extract_single(file_path: Path, config: AppConfig) -> dict[str, object]:
    """Process one card image and return its record.

    Args:
        file_path: Path to the image.
        config: Application configuration.

    Returns:
        Dictionary with filename, fields, sources and raw_text.
    """
    recognizer = TextRecognizer(config)
    extractor = IdentityCardExtractor(config.extraction)

    recognition = recognizer.recognize(file_path, file_path.name)
    result = extractor.extract(recognition.text)
    return {
        "filename": file_path.name,
        "fields": result.record,
        "sources": result.sources,
        "ocr_confidence": round(recognition.ocr_result.confidence, 3),
        "raw_text": result.raw_text,
    }


def extract_text_file(file_path: Path, config: AppConfig) -> dict[str, object]:
    """Extract a record from a file holding already recognized text."""
    extractor = IdentityCardExtractor(config.extraction)
    result = extractor.extract(file_path.read_text(encoding="utf-8"))
    return {
        "filename": file_path.name,
        "fields": result.record,
        "sources": result.sources,
    }


def process_folder(
    input_dir: Path,
    output_csv: Path,
    config: AppConfig,
    verbose: bool = False,
) -> dict[str, int]:
    """Process all card images in a folder and export records to CSV.

    A failing image is recorded with status ``failed`` and its error;
    processing continues with the next file.

    Args:
        input_dir: Directory containing card images.
        output_csv: Path for the output CSV file.
        config: Application configuration.
        verbose: Whether to print per-file progress.

    Returns:
        Summary dict with total, successful, and failed counts.
    """
    files = _find_documents(input_dir, _IMAGE_EXTENSIONS)
    if not files:
        logger.warning("No images found in %s", input_dir)
        return {"total": 0, "successful": 0, "failed": 0}

    logger.info("Found %d images to process", len(files))
    recognizer = TextRecognizer(config)
    extractor = IdentityCardExtractor(config.extraction)

    rows: list[dict[str, object]] = []
    successful = 0

    for i, file_path in enumerate(files, 1):
        if verbose:
            print(f"Processing [{i}/{len(files)}]: {file_path.name}")

        start_time = time.time()
        try:
            record, confidence = _record_for_file(file_path, recognizer, extractor)
        except Exception as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)
            rows.append({"filename": file_path.name, "status": "failed", "error": str(exc)})
            continue

        filled = sum(1 for value in record.values() if value)
        row: dict[str, object] = {
            "filename": file_path.name,
            "status": "success",
            "processing_time_s": round(time.time() - start_time, 2),
            "ocr_confidence": round(confidence, 3) if confidence is not None else "",
            "completeness": round(filled / len(FieldKey), 3),
            "error": "",
        }
        row.update(record)
        rows.append(row)
        successful += 1

    _write_csv(rows, output_csv)
    logger.info("Results written to %s", output_csv)

    summary = {"total": len(files), "successful": successful, "failed": len(files) - successful}
    _print_summary(summary, output_csv)
    return summary


def _write_csv(rows: list[dict[str, object]], output_path: Path) -> None:
    """Write result rows with the meta columns followed by every field.

    Args:
        rows: Result dictionaries.
        output_path: Path for the output CSV file.
    """
    if not rows:
        return

    columns = _META_COLUMNS + [key.value for key in FieldKey]
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)


def _print_summary(summary: dict[str, int], output_csv: Path) -> None:
    print(f"\n{'=' * 50}")
    print("Batch Processing Complete")
    print(f"{'=' * 50}")
    print(f"Total:      {summary['total']}")
    print(f"Successful: {summary['successful']}")
    print(f"Failed:     {summary['failed']}")
    print(f"Output:     {output_csv}")


def run_benchmark(
    ground_truth_path: Path,
    input_dir: Path,
    config: AppConfig,
    report_path: Path | None = None,
) -> str:
    """Extract every labeled document in a folder and score the results.

    ``.txt`` files are treated as OCR dumps and extracted directly;
    images go through recognition first. Ground truth keys are matched
    against file names.

    Args:
        ground_truth_path: JSON or CSV ground truth file.
        input_dir: Directory holding the labeled documents.
        config: Application configuration.
        report_path: Optional path for the text report.

    Returns:
        The formatted benchmark report.
    """
    ground_truth = load_ground_truth(ground_truth_path)
    extractor = IdentityCardExtractor(config.extraction)
    files = _find_documents(input_dir, _IMAGE_EXTENSIONS + _TEXT_EXTENSIONS)
    needs_ocr = any(p.suffix.lower() in _IMAGE_EXTENSIONS for p in files)
    recognizer = TextRecognizer(config) if needs_ocr else None

    predictions: dict[str, dict[str, str]] = {}
    for file_path in files:
        if file_path.name not in ground_truth:
            continue
        try:
            predictions[file_path.name], _ = _record_for_file(
                file_path, recognizer, extractor
            )
        except Exception as exc:
            logger.error("Failed to process %s: %s", file_path.name, exc)

    evaluator = Evaluator()
    result = evaluator.evaluate(predictions, ground_truth)
    return evaluator.generate_report(result, report_path)


def _emit_json(payload: dict[str, object], output: Path | None) -> None:
    output_str = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(output_str, encoding="utf-8")
        print(f"Output written to {output}")
    else:
        print(output_str)


def _require(path: Path, is_dir: bool = False) -> None:
    """Exit with an error message when an input path is missing."""
    if (is_dir and not path.is_dir()) or (not is_dir and not path.exists()):
        kind = "directory" if is_dir else "file"
        print(f"Error: {path} is not an existing {kind}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate command.

    Args:
        argv: Command-line arguments (defaults to sys.argv).
    """
    parser = argparse.ArgumentParser(
        description="Identity card field extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    single_parser = subparsers.add_parser("extract", help="Process a single card image")
    single_parser.add_argument("file", type=Path, help="Card image to process")
    single_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    text_parser = subparsers.add_parser("text", help="Extract from an OCR text file")
    text_parser.add_argument("file", type=Path, help="Text file with recognized text")
    text_parser.add_argument("-o", "--output", type=Path, help="Output JSON file")

    batch_parser = subparsers.add_parser("batch", help="Process a folder of card images")
    batch_parser.add_argument("input_dir", type=Path, help="Input directory with images")
    batch_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("results.csv"),
        help="Output CSV file (default: results.csv)",
    )
    batch_parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    bench_parser = subparsers.add_parser("benchmark", help="Score extraction accuracy")
    bench_parser.add_argument("ground_truth", type=Path, help="Ground truth JSON or CSV")
    bench_parser.add_argument("input_dir", type=Path, help="Directory of labeled documents")
    bench_parser.add_argument("-o", "--output", type=Path, help="Report output file")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    config = load_config(args.config)
    setup_logging(config.log_level)

    if args.command == "extract":
        _require(args.file)
        _emit_json(extract_single(args.file, config), args.output)
    elif args.command == "text":
        _require(args.file)
        _emit_json(extract_text_file(args.file, config), args.output)
    elif args.command == "batch":
        _require(args.input_dir, is_dir=True)
        process_folder(args.input_dir, args.output, config, args.verbose)
    elif args.command == "benchmark":
        _require(args.ground_truth)
        _require(args.input_dir, is_dir=True)
        print(run_benchmark(args.ground_truth, args.input_dir, config, args.output))


if __name__ == "__main__":
    main()
