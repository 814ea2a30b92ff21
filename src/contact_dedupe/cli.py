from __future__ import annotations

import argparse
import csv
import json
import logging
from dataclasses import asdict, replace
from pathlib import Path
from typing import Any

from contact_dedupe.config import ConfigError, DetectorSettings
from contact_dedupe.datasets import ReferenceDatasetGenerator
from contact_dedupe.detector import DuplicateDetector
from contact_dedupe.grouping import STRATEGIES
from contact_dedupe.imports import check_import
from contact_dedupe.merge import suggest_merge
from contact_dedupe.models import ContactRecord, DuplicateGroup, ImportCheck
from contact_dedupe.schema import CONTACT_COLUMNS, CONTACT_SCHEMA, RecordSchema

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _settings_from_args(args)
    except ConfigError as exc:
        parser.error(str(exc))
    _configure_logging(settings.log_level)

    if args.command == "run-test":
        if args.input_csv is not None and not args.input_csv.exists():
            parser.error(f"file not found: {args.input_csv}")
        run_test(
            size=args.size,
            duplicate_rate=args.duplicate_rate,
            seed=args.seed,
            output_dir=args.output_dir,
            input_csv=args.input_csv,
            settings=settings,
            show_groups=args.show_groups,
        )
        return

    if args.command == "check-import":
        for path in (args.existing, args.incoming):
            if not path.exists():
                parser.error(f"file not found: {path}")
        run_check_import(
            existing_csv=args.existing,
            incoming_csv=args.incoming,
            output=args.output,
            threshold=settings.threshold,
        )
        return

    parser.print_help()


def run_test(
    *,
    size: int,
    duplicate_rate: float,
    seed: int,
    output_dir: Path,
    input_csv: Path | None,
    settings: DetectorSettings,
    show_groups: int,
) -> dict[str, object]:
    output_dir.mkdir(parents=True, exist_ok=True)

    if input_csv is None:
        records = ReferenceDatasetGenerator(seed=seed).generate(size=size, duplicate_rate=duplicate_rate)
        dataset_path = output_dir / "test_dataset.csv"
        _write_records_csv(dataset_path, records)
    else:
        records = read_records_csv(input_csv)
        dataset_path = input_csv
    logger.info("Loaded %d records from %s", len(records), dataset_path)

    detector = DuplicateDetector.from_settings(settings)
    groups = detector.run(records)

    groups_path = output_dir / "groups.json"
    summary_path = output_dir / "summary.json"

    _write_json(groups_path, [_group_payload(group) for group in groups])
    summary = _build_summary(
        record_count=len(records),
        groups=groups,
        settings=settings,
        dataset_path=dataset_path,
        groups_path=groups_path,
    )
    _write_json(summary_path, summary)

    print(f"Dataset: {dataset_path}")
    print(f"Groups: {groups_path}")
    print(f"Summary: {summary_path}")
    print("---")
    print(f"records={summary['record_count']}")
    print(f"groups={summary['group_count']}")
    print(f"grouped_records={summary['grouped_record_count']}")
    print(f"avg_group_size={summary['avg_group_size']}")
    if show_groups > 0:
        print("---")
        print("sample_groups=")
        print(json.dumps(_group_sample_payload(groups, limit=show_groups), indent=2, ensure_ascii=False))
    return summary


def run_check_import(
    *,
    existing_csv: Path,
    incoming_csv: Path,
    output: Path,
    threshold: float,
) -> list[ImportCheck]:
    existing = read_records_csv(existing_csv)
    incoming = read_records_csv(incoming_csv)
    checks = check_import(incoming, existing, threshold=threshold)

    output.parent.mkdir(parents=True, exist_ok=True)
    _write_json(output, [_check_payload(check) for check in checks])

    print(f"Report: {output}")
    print("---")
    print(f"rows={len(checks)}")
    print(f"valid={sum(1 for c in checks if c.is_valid)}")
    print(f"duplicates={sum(1 for c in checks if c.is_duplicate)}")
    print(f"invalid={sum(1 for c in checks if c.errors)}")
    return checks


def read_records_csv(path: Path, schema: RecordSchema = CONTACT_SCHEMA) -> list[ContactRecord]:
    records: list[ContactRecord] = []
    with path.open("r", newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        for line_no, row in enumerate(reader, start=2):
            records.append(schema.to_record(row, fallback_id=f"row_{line_no}"))
    return records


def _build_summary(
    *,
    record_count: int,
    groups: list[DuplicateGroup[Any]],
    settings: DetectorSettings,
    dataset_path: Path,
    groups_path: Path,
) -> dict[str, object]:
    group_sizes = [len(group.group) for group in groups]

    return {
        "record_count": record_count,
        "threshold": settings.threshold,
        "strategy": settings.strategy,
        "fold_accents": settings.fold_accents,
        "group_count": len(groups),
        "grouped_record_count": sum(group_sizes),
        "avg_group_size": round(sum(group_sizes) / len(group_sizes), 3) if group_sizes else 0.0,
        "max_group_size": max(group_sizes) if group_sizes else 0,
        "min_group_size": min(group_sizes) if group_sizes else 0,
        "dataset_path": str(dataset_path),
        "groups_path": str(groups_path),
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="contact-dedupe", description="Contact duplicate detection CLI")
    parser.add_argument("--log-level", type=str, default=None)
    subparsers = parser.add_subparsers(dest="command")

    run_test_parser = subparsers.add_parser(
        "run-test",
        help="Generate or load a contact dataset, detect duplicates, and output groups + summary",
    )
    run_test_parser.add_argument("--size", type=int, default=500)
    run_test_parser.add_argument("--duplicate-rate", type=float, default=0.15)
    run_test_parser.add_argument("--seed", type=int, default=42)
    run_test_parser.add_argument("--input-csv", type=Path, default=None)
    run_test_parser.add_argument("--output-dir", type=Path, default=Path("data/cli_output"))
    run_test_parser.add_argument("--show-groups", type=int, default=10)
    _add_detector_arguments(run_test_parser)

    check_parser = subparsers.add_parser(
        "check-import",
        help="Validate rows to import and flag those already present in an existing export",
    )
    check_parser.add_argument("--existing", type=Path, required=True)
    check_parser.add_argument("--incoming", type=Path, required=True)
    check_parser.add_argument("--output", type=Path, default=Path("data/cli_output/import_check.json"))
    check_parser.add_argument("--threshold", type=float, default=None)

    return parser


def _add_detector_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--threshold", type=float, default=None)
    parser.add_argument("--strategy", choices=list(STRATEGIES), default=None)
    parser.add_argument("--fold-accents", action="store_true", default=None)


def _settings_from_args(args: argparse.Namespace) -> DetectorSettings:
    settings = DetectorSettings.from_env()
    overrides = {
        "threshold": getattr(args, "threshold", None),
        "strategy": getattr(args, "strategy", None),
        "fold_accents": getattr(args, "fold_accents", None),
        "log_level": args.log_level.upper() if args.log_level else None,
    }
    return replace(settings, **{k: v for k, v in overrides.items() if v is not None})


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _write_json(path: Path, payload: object) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)


def _write_records_csv(path: Path, records: list[ContactRecord]) -> None:
    extra_columns = sorted({column for record in records for column in record.attributes})
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=[*CONTACT_COLUMNS, *extra_columns])
        writer.writeheader()
        for record in records:
            writer.writerow(
                {
                    "id": record.id,
                    "name": record.name,
                    "email": record.email,
                    "phone": record.phone or "",
                    **record.attributes,
                }
            )


def _group_payload(group: DuplicateGroup[Any]) -> dict[str, Any]:
    return {
        "score": round(group.score, 4),
        "reasons": group.reasons,
        "records": [asdict(record) for record in group.group],
        "suggested_merge": asdict(suggest_merge(group)),
    }


def _group_sample_payload(groups: list[DuplicateGroup[Any]], limit: int = 10) -> list[dict[str, Any]]:
    payload: list[dict[str, Any]] = []
    for group in groups[:limit]:
        payload.append(
            {
                "size": len(group.group),
                "score": round(group.score, 4),
                "reasons": group.reasons,
                "members": [f"{record.name} <{record.email}> {record.phone or ''}".strip() for record in group.group],
            }
        )
    return payload


def _check_payload(check: ImportCheck) -> dict[str, Any]:
    row = check.row
    return {
        "id": row.id,
        "name": row.name,
        "email": row.email,
        "phone": row.phone,
        "is_valid": check.is_valid,
        "is_duplicate": check.is_duplicate,
        "errors": check.errors,
        "reasons": check.reasons,
        "similar": {"id": check.similar[0], "score": round(check.similar[1], 4)} if check.similar else None,
    }


if __name__ == "__main__":
    main()
