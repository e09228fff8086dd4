"""CLI entry point for SnapTally price tag OCR."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import load_config
from .errors import OCRError
from .extract import (
    confidence_band,
    extract_item_with_confidence,
    split_items_with_confidence,
)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="snaptally",
        description="Turn price tag OCR text into structured shopping items",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to the config file (TOML)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log progress")
    parser.add_argument("--debug", action="store_true", help="Log extraction details")

    sub = parser.add_subparsers(dest="command")

    # parse
    parse_parser = sub.add_parser("parse", help="Extract one item from OCR text")
    parse_parser.add_argument("text", nargs="?", help="OCR text (default: stdin)")
    parse_parser.add_argument("--file", "-f", type=str, help="Read OCR text from a file")
    parse_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # split
    split_parser = sub.add_parser("split", help="Extract several items from OCR text")
    split_parser.add_argument("text", nargs="?", help="OCR text (default: stdin)")
    split_parser.add_argument("--file", "-f", type=str, help="Read OCR text from a file")
    split_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # scan
    scan_parser = sub.add_parser("scan", help="Analyze a price tag image")
    scan_parser.add_argument("--image", type=str, required=True, help="Image file")
    scan_parser.add_argument("--json", action="store_true", help="Output as JSON")

    # mode
    mode_parser = sub.add_parser("mode", help="Show or change the OCR mode")
    mode_parser.add_argument(
        "value", nargs="?", choices=["local", "api", "toggle"],
        help="Mode to switch to (omit to show the current mode)",
    )

    # batch
    batch_parser = sub.add_parser("batch", help="Process many images with local OCR")
    batch_parser.add_argument("images", nargs="+", help="Image files")
    batch_parser.add_argument("--csv", type=str, default=None, metavar="FILE",
                              help="Export results as CSV")
    batch_parser.add_argument("--json-out", type=str, default=None, metavar="FILE",
                              help="Export results as JSON")
    batch_parser.add_argument(
        "--remote-parse", action="store_true",
        help="Parse recognized text with the remote analyzer",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _setup_logging(args)

    load_dotenv()

    try:
        config = load_config(args.config)
        match args.command:
            case "parse":
                _cmd_parse(args)
            case "split":
                _cmd_split(args)
            case "scan":
                asyncio.run(_cmd_scan(config, args))
            case "mode":
                asyncio.run(_cmd_mode(config, args))
            case "batch":
                asyncio.run(_cmd_batch(config, args))
    except (OCRError, ImportError) as e:
        # Missing optional extras are reported like OCR errors
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _setup_logging(args) -> None:
    level = logging.WARNING
    if args.verbose:
        level = logging.INFO
    if args.debug:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_text(args) -> str:
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    if args.text is not None:
        return args.text
    return sys.stdin.read()


def _print_item(item, confidence: float) -> None:
    print(f"  Name:       {item.name}")
    print(f"  Brand:      {item.brand}")
    print(f"  Price:      ${item.price:.2f}")
    print(f"  Weight:     {item.weight:g}")
    print(f"  Confidence: {confidence:.0%} ({confidence_band(confidence)})")


def _cmd_parse(args) -> None:
    item, confidence = extract_item_with_confidence(_read_text(args))
    if args.json:
        data = {**item.to_dict(), "confidence": confidence}
        print(json.dumps(data, ensure_ascii=False, indent=2))
    else:
        _print_item(item, confidence)


def _cmd_split(args) -> None:
    pairs = split_items_with_confidence(_read_text(args))
    if args.json:
        data = [{**item.to_dict(), "confidence": c} for item, c in pairs]
        print(json.dumps(data, ensure_ascii=False, indent=2))
        return
    if not pairs:
        print("No items found.")
        return
    for index, (item, confidence) in enumerate(pairs, start=1):
        print(f"Item {index}:")
        _print_item(item, confidence)


def _build_service(config):
    from .analysis import create_analyzer
    from .db.settings import SettingsDB
    from .ocr_settings import OCRSettings
    from .recognition import create_recognizer
    from .service import OCRService

    db = SettingsDB(config.settings.db_path)
    service = OCRService(
        settings=OCRSettings(db),
        recognizer_factory=lambda: create_recognizer(config),
        analyzer=create_analyzer(config),
    )
    return service, db


async def _cmd_scan(config, args) -> None:
    service, db = _build_service(config)
    try:
        result = await service.analyze_image(args.image)
    finally:
        db.close()

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return

    print(f"Source:     {result.source}")
    print(f"  Name:     {result.name}")
    print(f"  Brand:    {result.brand}")
    print(f"  Price:    ${result.price:.2f}")
    print(f"  Weight:   {result.weight:g}")
    if result.confidence is not None:
        print(f"  Confidence: {result.confidence:.0%}")


async def _cmd_mode(config, args) -> None:
    from .db.settings import SettingsDB
    from .ocr_settings import OCRSettings

    db = SettingsDB(config.settings.db_path)
    settings = OCRSettings(db)
    try:
        match args.value:
            case "local":
                await settings.set_use_local_ocr(True)
            case "api":
                await settings.set_use_local_ocr(False)
            case "toggle":
                await settings.toggle_use_local_ocr()
        use_local = await settings.get_use_local_ocr()
    finally:
        db.close()

    print(f"OCR mode: {'local' if use_local else 'api'}")


async def _cmd_batch(config, args) -> None:
    from .batch import BatchProcessor, export_csv, export_json, summarize
    from .recognition import create_recognizer

    analyzer = None
    if args.remote_parse:
        from .analysis import create_analyzer

        analyzer = create_analyzer(config)

    processor = BatchProcessor(create_recognizer(config), analyzer=analyzer)
    results = await processor.process(args.images)
    stats = summarize(
        results,
        high=config.batch.high_confidence,
        medium=config.batch.medium_confidence,
    )

    print(f"Processed {stats.total} image(s): {stats.successful} ok, {stats.failed} failed")
    print(f"  Average confidence:      {stats.average_confidence:.1%}")
    print(f"  Average processing time: {stats.average_processing_time_ms:.0f} ms")
    print(
        f"  High / medium / low:     "
        f"{stats.high_confidence} / {stats.medium_confidence} / {stats.low_confidence}"
    )

    if args.csv:
        print(f"CSV saved: {export_csv(results, args.csv)}")
    if args.json_out:
        print(f"JSON saved: {export_json(results, args.json_out)}")
