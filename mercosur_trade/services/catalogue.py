"""
Catalogue-level tools: data sources and server information.
"""

from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mercosur_trade.config import (
    LICENSE,
    NETWORK,
    PUBLISHER,
    REPOSITORY_URL,
    SERVER_DESCRIPTION,
    SERVER_NAME,
    SERVER_VERSION,
)
from mercosur_trade.services.countries import BLOCS
from mercosur_trade.services.metadata import build_meta
from mercosur_trade.web.db.models import (
    Agreement,
    DataTransferRule,
    DigitalTradeObligation,
    MutualRecognition,
    Provision,
    Source,
    TradeBloc,
)

TOOL_NAMES = [
    "search_agreements",
    "get_provision",
    "get_data_transfer_rules",
    "get_mutual_recognition",
    "get_trade_bloc_rules",
    "check_digital_trade_obligations",
    "list_sources",
    "about",
    "check_data_freshness",
]


def _count(session: Session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def list_sources(session: Session) -> Dict[str, Any]:
    """All data sources with record counts and last fetch dates."""
    sources = session.execute(
        select(Source).order_by(Source.authority, Source.jurisdiction)
    ).scalars().all()

    return {
        "sources": [source.as_dict() for source in sources],
        "totals": {
            "trade_blocs": _count(session, TradeBloc),
            "agreements": _count(session, Agreement),
            "provisions": _count(session, Provision),
        },
        "_meta": build_meta(),
    }


def about(session: Session) -> Dict[str, Any]:
    """Server metadata: version, tools, statistics, blocs and publisher."""
    return {
        "name": SERVER_NAME,
        "version": SERVER_VERSION,
        "description": SERVER_DESCRIPTION,
        "blocs": [
            {"id": bloc["id"], "name": bloc["name"], "member_count": len(bloc["members"])}
            for bloc in BLOCS.values()
        ],
        "statistics": {
            "trade_blocs": _count(session, TradeBloc),
            "agreements": _count(session, Agreement),
            "provisions": _count(session, Provision),
            "data_transfer_rules": _count(session, DataTransferRule),
            "mutual_recognition_agreements": _count(session, MutualRecognition),
            "digital_trade_obligations": _count(session, DigitalTradeObligation),
        },
        "tools": list(TOOL_NAMES),
        "publisher": PUBLISHER,
        "license": LICENSE,
        "repository": REPOSITORY_URL,
        "network": dict(NETWORK),
        "_metadata": build_meta(),
    }
