"""
Database builder for the trade agreements catalogue.

Creates a fresh SQLite database with:
1. The relational schema (SQLAlchemy models, via db.create_all)
2. The provisions_fts FTS5 index plus insert/update/delete sync triggers
3. Seed data from the JSON files in mercosur_trade/ingestion/seed/
4. Per-source item counts and db_metadata (schema_version, build_date, ...)

The finished file uses journal_mode=DELETE and is VACUUMed so it can be
shipped and opened read-only.

Extra seed directories may hold provision files of the form
    {"agreement": {"id": "treaty-of-asuncion"}, "provisions": [{...}, ...]}
Duplicate (agreement_id, article_ref) pairs are skipped with a warning.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import func, select, text

from mercosur_trade.config import SERVER_NAME
from mercosur_trade.services.countries import to_iso_date
from mercosur_trade.web.db import db
from mercosur_trade.web.db.models import (
    Agreement,
    DataTransferRule,
    DbMetadata,
    DigitalTradeObligation,
    MutualRecognition,
    Provision,
    Source,
    TradeBloc,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"
SEED_DIR = Path(__file__).resolve().parent / "seed"

# Which bloc each portal source reports on; bilateral-agreements counts relation rows
BLOC_SOURCES = {
    "mercosur-secretariat": "mercosur",
    "pacific-alliance-portal": "pacific_alliance",
    "prosur-portal": "prosur",
}
BILATERAL_SOURCE = "bilateral-agreements"

FTS_DDL = [
    """
    CREATE VIRTUAL TABLE provisions_fts USING fts5(
        content, title, article_ref,
        content='provisions', content_rowid='id'
    )
    """,
    """
    CREATE TRIGGER provisions_ai AFTER INSERT ON provisions BEGIN
        INSERT INTO provisions_fts(rowid, content, title, article_ref)
        VALUES (new.id, new.content, new.title, new.article_ref);
    END
    """,
    """
    CREATE TRIGGER provisions_ad AFTER DELETE ON provisions BEGIN
        INSERT INTO provisions_fts(provisions_fts, rowid, content, title, article_ref)
        VALUES ('delete', old.id, old.content, old.title, old.article_ref);
    END
    """,
    """
    CREATE TRIGGER provisions_au AFTER UPDATE ON provisions BEGIN
        INSERT INTO provisions_fts(provisions_fts, rowid, content, title, article_ref)
        VALUES ('delete', old.id, old.content, old.title, old.article_ref);
        INSERT INTO provisions_fts(rowid, content, title, article_ref)
        VALUES (new.id, new.content, new.title, new.article_ref);
    END
    """,
]


@dataclass
class BuildReport:
    """Counts and facts about a finished build."""
    db_path: str
    build_date: str
    trade_blocs: int = 0
    sources: int = 0
    agreements: int = 0
    provisions: int = 0
    data_transfer_rules: int = 0
    mutual_recognition: int = 0
    digital_trade_obligations: int = 0
    skipped_provisions: List[str] = field(default_factory=list)
    size_bytes: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_seed_file(path: Path) -> Dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


# ============================================================================
# Seeding steps
# ============================================================================

def _seed_catalogue(catalogue: Dict[str, Any], build_date: str) -> None:
    for bloc in catalogue.get("trade_blocs", []):
        db.session.add(TradeBloc(**bloc))

    for source in catalogue.get("sources", []):
        db.session.add(Source(**{
            **source,
            "last_fetched": source.get("last_fetched") or build_date,
            "last_updated": source.get("last_updated") or build_date,
        }))

    for agreement in catalogue.get("agreements", []):
        db.session.add(Agreement(**{
            **agreement,
            "last_updated": agreement.get("last_updated") or build_date,
        }))
    db.session.flush()


def _seed_provisions(
    provisions: Iterable[Dict[str, Any]],
    seen: Set[Tuple[str, str]],
    skipped: List[str],
    default_agreement_id: Optional[str] = None,
) -> int:
    added = 0
    for item in provisions:
        agreement_id = item.get("agreement_id") or default_agreement_id
        article_ref = item.get("article_ref")
        if not agreement_id or not article_ref or not item.get("content"):
            skipped.append(f"{agreement_id}:{article_ref} (incomplete)")
            continue
        key = (agreement_id, str(article_ref))
        if key in seen:
            logger.warning("Skipping duplicate provision %s art. %s", *key)
            skipped.append(f"{agreement_id}:{article_ref} (duplicate)")
            continue
        seen.add(key)
        db.session.add(Provision(
            agreement_id=agreement_id,
            article_ref=str(article_ref),
            title=item.get("title"),
            content=item["content"],
            chapter=item.get("chapter"),
            topic=item.get("topic"),
        ))
        added += 1
    db.session.flush()
    return added


def _seed_extra_provision_dirs(
    directories: Iterable[Path],
    seen: Set[Tuple[str, str]],
    skipped: List[str],
) -> None:
    for directory in directories:
        directory = Path(directory)
        if not directory.is_dir():
            logger.warning("Seed directory not found: %s", directory)
            continue
        for path in sorted(directory.glob("*.json")):
            try:
                data = load_seed_file(path)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Could not parse seed file %s: %s", path.name, e)
                continue
            agreement_id = (data.get("agreement") or {}).get("id")
            provisions = data.get("provisions")
            if not agreement_id or not isinstance(provisions, list):
                logger.warning("Seed file %s has no agreement id or provisions list", path.name)
                continue
            added = _seed_provisions(provisions, seen, skipped, default_agreement_id=agreement_id)
            logger.info("Loaded %d provisions from %s", added, path.name)


def _seed_relations(relations: Dict[str, Any]) -> None:
    for rule in relations.get("data_transfer_rules", []):
        db.session.add(DataTransferRule(**rule))
    for entry in relations.get("mutual_recognition", []):
        db.session.add(MutualRecognition(**entry))
    for obligation in relations.get("digital_trade_obligations", []):
        db.session.add(DigitalTradeObligation(**obligation))
    db.session.flush()


def _count(model) -> int:
    return db.session.execute(select(func.count()).select_from(model)).scalar_one()


def _update_source_counts() -> None:
    for source_id, bloc_id in BLOC_SOURCES.items():
        source = db.session.get(Source, source_id)
        if source is None:
            continue
        source.item_count = db.session.execute(
            select(func.count()).select_from(Agreement).where(Agreement.bloc_id == bloc_id)
        ).scalar_one()

    bilateral = db.session.get(Source, BILATERAL_SOURCE)
    if bilateral is not None:
        bilateral.item_count = _count(DataTransferRule) + _count(MutualRecognition)
    db.session.flush()


def _write_metadata(build_date: str) -> None:
    for key, value in (
        ("schema_version", SCHEMA_VERSION),
        ("mcp_name", SERVER_NAME),
        ("category", "domain_intelligence"),
        ("build_date", build_date),
    ):
        db.session.merge(DbMetadata(key=key, value=value))
    db.session.flush()


# ============================================================================
# Entry point
# ============================================================================

def build_database(
    db_path: str,
    seed_dir: Optional[Path] = None,
    extra_seed_dirs: Iterable[Path] = (),
    build_date: Optional[date] = None,
) -> BuildReport:
    """
    Build the database file from seed data, replacing any existing file.

    Args:
        db_path: Output SQLite file
        seed_dir: Directory with catalogue.json, provisions.json, relations.json
            (defaults to the seed data shipped with the package)
        extra_seed_dirs: Directories with additional per-agreement provision files
        build_date: Date recorded as build_date / default fetch date (today)

    Returns:
        BuildReport with table counts and the file size
    """
    from mercosur_trade.web import create_app

    path = Path(db_path).resolve()
    seed_dir = Path(seed_dir) if seed_dir else SEED_DIR
    build_day = to_iso_date(build_date)

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists():
        logger.info("Removing existing database %s", path)
        path.unlink()

    report = BuildReport(db_path=str(path), build_date=build_day)

    app = create_app({"SQLALCHEMY_DATABASE_URI": f"sqlite:///{path.as_posix()}"})
    with app.app_context():
        db.create_all()
        for statement in FTS_DDL:
            db.session.execute(text(statement))
        logger.info("Schema created")

        _seed_catalogue(load_seed_file(seed_dir / "catalogue.json"), build_day)

        seen: Set[Tuple[str, str]] = set()
        _seed_provisions(load_seed_file(seed_dir / "provisions.json").get("provisions", []),
                         seen, report.skipped_provisions)
        _seed_extra_provision_dirs(extra_seed_dirs, seen, report.skipped_provisions)

        _seed_relations(load_seed_file(seed_dir / "relations.json"))
        _update_source_counts()
        _write_metadata(build_day)

        db.session.execute(text("INSERT INTO provisions_fts(provisions_fts) VALUES('rebuild')"))
        db.session.commit()
        logger.info("FTS index rebuilt")

        report.trade_blocs = _count(TradeBloc)
        report.sources = _count(Source)
        report.agreements = _count(Agreement)
        report.provisions = _count(Provision)
        report.data_transfer_rules = _count(DataTransferRule)
        report.mutual_recognition = _count(MutualRecognition)
        report.digital_trade_obligations = _count(DigitalTradeObligation)
        db.session.remove()

        # Single-file journal + compaction so the file can be shipped read-only
        with db.engine.connect().execution_options(isolation_level="AUTOCOMMIT") as conn:
            conn.execute(text("PRAGMA journal_mode = DELETE"))
            conn.execute(text("VACUUM"))
        db.engine.dispose()

    report.size_bytes = path.stat().st_size
    logger.info("Build complete: %s", report.as_dict())
    return report
