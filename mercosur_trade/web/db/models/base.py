from typing import Any, Dict

from mercosur_trade.web.db import db


class BaseModel(db.Model):
    __abstract__ = True

    def as_dict(self) -> Dict[str, Any]:
        return {column.name: getattr(self, column.name) for column in self.__table__.columns}
