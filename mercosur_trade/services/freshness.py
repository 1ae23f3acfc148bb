"""
Data Freshness Service

Reports per-source data age and flags stale sources so callers can judge
data currency before relying on results.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from mercosur_trade.config import STALE_THRESHOLD_DAYS
from mercosur_trade.services.countries import days_since, to_iso_date
from mercosur_trade.services.metadata import build_meta
from mercosur_trade.web.db.models import Agreement, Source, TradeBloc

logger = logging.getLogger(__name__)


class FreshnessService:
    """
    Tracks and reports data freshness.

    Provides:
    - Age in days per source (from last_fetched)
    - Stale flag per source (age > stale_threshold_days)
    - Agreement counts and newest update per trade bloc
    """

    def __init__(self, session: Session, stale_threshold_days: int = STALE_THRESHOLD_DAYS):
        self.session = session
        self.stale_threshold_days = stale_threshold_days

    def get_source_freshness(self, now: datetime) -> List[Dict[str, Any]]:
        sources = self.session.execute(
            select(Source).order_by(Source.authority, Source.id)
        ).scalars().all()

        freshness = []
        for source in sources:
            age = days_since(source.last_fetched, now)
            freshness.append({
                "source_id": source.id,
                "full_name": source.full_name,
                "authority": source.authority,
                "last_fetched": source.last_fetched,
                "last_updated": source.last_updated,
                "item_count": source.item_count,
                "age_days": age,
                "is_stale": self._is_stale(age),
            })
        return freshness

    def get_bloc_freshness(self, now: datetime) -> List[Dict[str, Any]]:
        stmt = (
            select(
                TradeBloc.id,
                TradeBloc.name,
                func.count(func.distinct(Agreement.id)),
                func.max(Agreement.last_updated),
            )
            .outerjoin(Agreement, Agreement.bloc_id == TradeBloc.id)
            .group_by(TradeBloc.id, TradeBloc.name)
            .order_by(TradeBloc.id)
        )
        return [
            {
                "bloc_id": bloc_id,
                "bloc_name": bloc_name,
                "agreement_count": agreement_count,
                "newest_update": newest_update,
                "age_days": days_since(newest_update, now),
            }
            for bloc_id, bloc_name, agreement_count, newest_update in self.session.execute(stmt).all()
        ]

    def check(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        """Full freshness report."""
        now = now or datetime.now()
        sources = self.get_source_freshness(now)
        stale = [source for source in sources if source["is_stale"]]
        if stale:
            logger.warning("Stale sources: %s", ", ".join(source["source_id"] for source in stale))

        return {
            "checked_at": to_iso_date(now.date()),
            "stale_threshold_days": self.stale_threshold_days,
            "stale_count": len(stale),
            "total_sources": len(sources),
            "sources": sources,
            "blocs": self.get_bloc_freshness(now),
            "_metadata": build_meta(),
        }

    def _is_stale(self, age_days: Optional[int]) -> bool:
        return age_days is not None and age_days > self.stale_threshold_days


def check_data_freshness(session: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Per-source data age with stale flags, plus per-bloc agreement freshness."""
    return FreshnessService(session).check(now)
