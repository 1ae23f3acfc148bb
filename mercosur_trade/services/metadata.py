"""
Response metadata block attached to every tool result.
"""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from mercosur_trade.config import DISCLAIMER, SERVER_NAME, SERVER_VERSION
from mercosur_trade.services.countries import to_iso_date


class ResponseMeta(BaseModel):
    """Disclaimer, data age and server identity. Same shape for every tool."""
    model_config = ConfigDict(strict=True)

    disclaimer: str
    data_age: str
    server: str
    version: str


def build_meta(**overrides: Any) -> Dict[str, str]:
    """Build the metadata block; keyword overrides replace individual fields."""
    meta = ResponseMeta(
        disclaimer=DISCLAIMER,
        data_age=to_iso_date(),
        server=SERVER_NAME,
        version=SERVER_VERSION,
    )
    if overrides:
        meta = meta.model_copy(update=overrides)
    return meta.model_dump()
