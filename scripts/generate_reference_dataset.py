from __future__ import annotations

import argparse
import csv
from pathlib import Path

from contact_dedupe.datasets import ReferenceDatasetGenerator
from contact_dedupe.schema import CONTACT_COLUMNS


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate synthetic tenant/owner contact dataset")
    parser.add_argument("--size", type=int, default=2000)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--duplicate-rate", type=float, default=0.15)
    parser.add_argument("--output", type=Path, default=Path("data/reference_contacts.csv"))
    args = parser.parse_args()

    records = ReferenceDatasetGenerator(seed=args.seed).generate(
        size=args.size,
        duplicate_rate=args.duplicate_rate,
    )

    args.output.parent.mkdir(parents=True, exist_ok=True)
    with args.output.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=[*CONTACT_COLUMNS, "role"])
        writer.writeheader()
        for record in records:
            writer.writerow(
                {
                    "id": record.id,
                    "name": record.name,
                    "email": record.email,
                    "phone": record.phone or "",
                    "role": record.attributes.get("role", ""),
                }
            )


if __name__ == "__main__":
    main()
