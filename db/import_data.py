"""
db/import_data.py
-----------------
Seeds the composers and compositions tables from an Open Opus dump
(https://api.openopus.org/work/dump.json saved to disk).

Expected shape:
    {"composers": [{"name", "complete_name", "birth", "death",
                    "works": [{"title", "subtitle", "genre"}, ...]}, ...]}

Usage:
    python -m db.import_data dump.json
"""

import json
import sys
from datetime import date
from typing import Optional

import pandas as pd

from db.connection import close_pool, init_pool, transaction
from db.init_db import create_tables
from repositories.composer_repo import ComposerRepository
from repositories.composition_repo import CompositionRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def _clean(value):
    """NaN/NaT/empty string -> None."""
    if value is None or (not isinstance(value, (list, dict)) and pd.isna(value)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _parse_date(value) -> Optional[date]:
    """Leading ISO date of a dump value, or None. Stays a datetime.date since
    pandas timestamps stop at 1677."""
    value = _clean(value)
    if value is None:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def load_dump(path: str) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Read a dump into two frames.

    Returns:
        (composers, works). ``works`` carries a ``composer_index`` column
        pointing at the row of ``composers`` it belongs to.
    """
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)

    composers = pd.DataFrame(raw.get("composers", []))
    if composers.empty:
        return composers, pd.DataFrame(columns=["composer_index", "title", "subtitle", "genre"])

    composers["display_name"] = composers.get("complete_name", composers["name"]).fillna(
        composers["name"]
    )
    for column in ("birth", "death"):
        if column not in composers:
            composers[column] = None
        composers[column] = composers[column].map(_parse_date)

    records = []
    for index, works in composers.get("works", pd.Series(dtype=object)).items():
        for work in works if isinstance(works, list) else []:
            records.append({"composer_index": index, **work})
    works = pd.DataFrame(records, columns=["composer_index", "title", "subtitle", "genre"])
    works = works.dropna(subset=["title"])
    return composers, works


def import_dump(path: str) -> tuple[int, int]:
    """
    Insert every composer and work of a dump in one transaction.

    Returns:
        (composers inserted, compositions inserted)
    """
    composers, works = load_dump(path)
    composer_repo = ComposerRepository()
    composition_repo = CompositionRepository()
    works_by_composer = works.groupby("composer_index") if not works.empty else None

    n_composers = n_works = 0
    with transaction():
        for index, row in composers.iterrows():
            composer = composer_repo.insert_composer(
                row["display_name"], _clean(row["birth"]), _clean(row["death"])
            )
            n_composers += 1
            if works_by_composer is None or index not in works_by_composer.groups:
                continue
            for _, work in works_by_composer.get_group(index).iterrows():
                composition_repo.insert_composition(
                    composer.composer_id,
                    work["title"],
                    _clean(work["subtitle"]),
                    _clean(work["genre"]),
                )
                n_works += 1

    logger.info(f"Imported {n_composers} composers and {n_works} compositions from {path}")
    return n_composers, n_works


def main(argv: list[str]) -> int:
    if len(argv) != 2:
        print("Usage: python -m db.import_data <dump.json>")
        return 1
    init_pool()
    try:
        create_tables()
        import_dump(argv[1])
    finally:
        close_pool()
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
