"""
Trade bloc rules: membership, agreements and provision counts per bloc.
"""

from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mercosur_trade.errors import InvalidInputError
from mercosur_trade.services.countries import BLOCS, country_refs
from mercosur_trade.services.metadata import build_meta
from mercosur_trade.web.db.models import Agreement, Provision, TradeBloc


def get_trade_bloc_rules(session: Session, bloc: str) -> Dict[str, Any]:
    """
    Rules, membership and structure of a trade bloc.

    Args:
        session: SQLAlchemy session on the relation store
        bloc: "mercosur", "pacific_alliance" or "prosur" (any case)

    Returns:
        Dict with the bloc record (members/associates with display names),
        its agreements (newest first) and the number of provisions.
        Unknown blocs return found=False with the valid values.
    """
    if not isinstance(bloc, str):
        raise InvalidInputError("bloc must be a string.", field="bloc")

    bloc_id = bloc.strip().lower()
    bloc_info = BLOCS.get(bloc_id)

    if bloc_info is None:
        return {
            "found": False,
            "bloc": bloc,
            "message": f'Unknown trade bloc "{bloc}". Valid values: {", ".join(BLOCS)}.',
            "_meta": build_meta(),
        }

    bloc_row = session.get(TradeBloc, bloc_id)

    agreements = session.execute(
        select(Agreement)
        .where(Agreement.bloc_id == bloc_id)
        .order_by(Agreement.year.desc(), Agreement.id)
    ).scalars().all()

    provisions_count = session.execute(
        select(func.count(Provision.id))
        .join(Agreement, Agreement.id == Provision.agreement_id)
        .where(Agreement.bloc_id == bloc_id)
    ).scalar_one()

    return {
        "found": True,
        "bloc": {
            **(bloc_row.as_dict() if bloc_row else {}),
            "id": bloc_info["id"],
            "name": bloc_info["name"],
            "full_name": bloc_info["full_name"],
            "members": country_refs(bloc_info["members"]),
            "associates": country_refs(bloc_info["associates"]),
        },
        "agreements": {
            "count": len(agreements),
            "items": [agreement.as_dict() for agreement in agreements],
        },
        "provisions_count": provisions_count,
        "_meta": build_meta(),
    }
