"""
SQLAlchemy models for the LATAM trade agreements catalogue.

These tables are populated once by the database builder from the shipped seed
files and are only ever read while serving.

Relation tables:
- DataTransferRule: bilateral, keyed by an ORDERED pair (source, dest) but
  semantically unordered. The unique constraint only covers the ordered pair,
  so the reverse direction is not prevented structurally.
- MutualRecognition: bilateral, several rows per unordered pair (one per domain).
- DigitalTradeObligation: multi-party, party list denormalized as "BR,AR,UY,PY".

Full-text search over provisions is handled by the provisions_fts FTS5
virtual table (see mercosur_trade.ingestion.build_db), not by a model.
"""

from typing import Any, Dict

from sqlalchemy import UniqueConstraint

from mercosur_trade.web.db import db
from mercosur_trade.web.db.models.base import BaseModel


class DbMetadata(BaseModel):
    """Key/value build metadata (schema_version, build_date, ...)."""
    __tablename__ = "db_metadata"

    key = db.Column(db.String(64), primary_key=True)
    value = db.Column(db.Text, nullable=False)


class TradeBloc(BaseModel):
    """
    A trade bloc (Mercosur, Pacific Alliance, PROSUR).

    Membership is stored denormalized; the static bloc definitions in
    mercosur_trade.services.countries are authoritative for display.
    """
    __tablename__ = "trade_blocs"

    id = db.Column(db.String(32), primary_key=True)  # "mercosur"
    name = db.Column(db.String(128), nullable=False)
    full_name = db.Column(db.String(256), nullable=True)
    founded_year = db.Column(db.Integer, nullable=True)
    website = db.Column(db.String(256), nullable=True)
    member_countries = db.Column(db.Text, nullable=False)  # "BR,AR,UY,PY"
    associate_countries = db.Column(db.Text, nullable=True)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "full_name": self.full_name,
            "founded_year": self.founded_year,
            "website": self.website,
            "member_countries": self.member_countries,
            "associate_countries": self.associate_countries,
        }


class Agreement(BaseModel):
    """A treaty, protocol, decision or declaration."""
    __tablename__ = "agreements"

    id = db.Column(db.String(64), primary_key=True)  # "treaty-of-asuncion"
    bloc_id = db.Column(db.String(32), db.ForeignKey("trade_blocs.id"), nullable=True, index=True)
    title = db.Column(db.String(256), nullable=False)
    official_name = db.Column(db.Text, nullable=True)
    year = db.Column(db.Integer, nullable=True)
    agreement_type = db.Column(db.String(64), nullable=True)  # "founding_treaty", "protocol", ...
    parties = db.Column(db.Text, nullable=False)  # "BR,AR,UY,PY"
    status = db.Column(db.String(32), default="in_force")
    source_url = db.Column(db.String(512), nullable=True)
    last_updated = db.Column(db.String(10), nullable=True)  # ISO date

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "official_name": self.official_name,
            "year": self.year,
            "agreement_type": self.agreement_type,
            "parties": self.parties,
            "status": self.status,
            "source_url": self.source_url,
        }


class Provision(BaseModel):
    """Article-level content of an agreement."""
    __tablename__ = "provisions"
    __table_args__ = (
        UniqueConstraint("agreement_id", "article_ref", name="uq_provision_article"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    agreement_id = db.Column(db.String(64), db.ForeignKey("agreements.id"), nullable=False, index=True)
    article_ref = db.Column(db.String(32), nullable=False)  # "1", "12.3", "Annex I"
    title = db.Column(db.String(256), nullable=True)
    content = db.Column(db.Text, nullable=False)
    chapter = db.Column(db.String(256), nullable=True)
    topic = db.Column(db.String(64), nullable=True, index=True)  # "data_flows", "customs_union", ...

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "agreement_id": self.agreement_id,
            "article_ref": self.article_ref,
            "title": self.title,
            "content": self.content,
            "chapter": self.chapter,
            "topic": self.topic,
        }


class DataTransferRule(BaseModel):
    """
    Bilateral data transfer framework between two jurisdictions.

    Looked up exact-direction first, then reversed; see
    mercosur_trade.services.relation_resolver.get_data_transfer_rules.
    """
    __tablename__ = "data_transfer_rules"
    __table_args__ = (
        UniqueConstraint("source_country", "dest_country", name="uq_transfer_pair"),
        db.Index("idx_transfer_rules_pair", "source_country", "dest_country"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    source_country = db.Column(db.String(8), nullable=False)
    dest_country = db.Column(db.String(8), nullable=False)
    framework = db.Column(db.Text, nullable=True)  # "LGPD (Brazil) + PDPA (Argentina)"
    adequacy_status = db.Column(db.String(32), nullable=True)  # "adequacy", "mutual_adequacy", "conditional", ...
    transfer_mechanisms = db.Column(db.Text, nullable=True)
    restrictions = db.Column(db.Text, nullable=True)
    legal_basis = db.Column(db.Text, nullable=True)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source_country": self.source_country,
            "dest_country": self.dest_country,
            "framework": self.framework,
            "adequacy_status": self.adequacy_status,
            "transfer_mechanisms": self.transfer_mechanisms,
            "restrictions": self.restrictions,
            "legal_basis": self.legal_basis,
        }


class MutualRecognition(BaseModel):
    """
    Mutual recognition arrangement between two countries in one domain.

    Rows are identified by (unordered pair, domain); this is not enforced
    structurally.
    """
    __tablename__ = "mutual_recognition"
    __table_args__ = (
        db.Index("idx_mutual_rec_pair", "country_a", "country_b"),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    country_a = db.Column(db.String(8), nullable=False)
    country_b = db.Column(db.String(8), nullable=False)
    domain = db.Column(db.String(64), nullable=False)  # "customs_procedures", "product_standards", ...
    agreement_id = db.Column(db.String(64), db.ForeignKey("agreements.id"), nullable=True)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(32), default="active")

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "country_a": self.country_a,
            "country_b": self.country_b,
            "domain": self.domain,
            "agreement_id": self.agreement_id,
            "description": self.description,
            "status": self.status,
        }


class DigitalTradeObligation(BaseModel):
    """An obligation from an e-commerce / digital trade chapter."""
    __tablename__ = "digital_trade_obligations"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    agreement_id = db.Column(db.String(64), db.ForeignKey("agreements.id"), nullable=True, index=True)
    countries = db.Column(db.Text, nullable=False)  # "CL,CO,MX,PE"
    obligation = db.Column(db.Text, nullable=False)
    chapter = db.Column(db.String(256), nullable=True)
    description = db.Column(db.Text, nullable=True)
    legal_basis = db.Column(db.Text, nullable=True)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "agreement_id": self.agreement_id,
            "countries": self.countries,
            "obligation": self.obligation,
            "chapter": self.chapter,
            "description": self.description,
            "legal_basis": self.legal_basis,
        }


class Source(BaseModel):
    """An upstream data source with fetch dates and item counts."""
    __tablename__ = "sources"

    id = db.Column(db.String(64), primary_key=True)
    full_name = db.Column(db.String(256), nullable=False)
    authority = db.Column(db.String(256), nullable=True)
    jurisdiction = db.Column(db.String(64), nullable=True)
    source_url = db.Column(db.String(512), nullable=True)
    last_fetched = db.Column(db.String(10), nullable=True)  # ISO date
    last_updated = db.Column(db.String(10), nullable=True)
    item_count = db.Column(db.Integer, default=0)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "authority": self.authority,
            "jurisdiction": self.jurisdiction,
            "source_url": self.source_url,
            "last_fetched": self.last_fetched,
            "last_updated": self.last_updated,
            "item_count": self.item_count,
        }
