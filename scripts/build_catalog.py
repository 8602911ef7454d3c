from __future__ import annotations

import argparse
import json
from pathlib import Path

from geoguess.datasets import load_catalog
from geoguess.logging_config import setup_logging


def _write_jsonl(path: Path, rows: list[dict]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        for row in rows:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")


def build(data_dir: Path, out_file: Path) -> int:
    catalog = load_catalog(data_dir)
    _write_jsonl(out_file, [c.model_dump() for c in catalog])
    return len(catalog)


def main() -> None:
    parser = argparse.ArgumentParser(description="Download datasets and snapshot the country catalog.")
    parser.add_argument("--data-dir", default="data")
    parser.add_argument("--out", default="data/catalog.jsonl")
    args = parser.parse_args()

    setup_logging()
    count = build(Path(args.data_dir), Path(args.out))
    print(f"Wrote {count} countries to {args.out}")


if __name__ == "__main__":
    main()
