from .trade_tables import (
    DbMetadata,
    TradeBloc,
    Agreement,
    Provision,
    DataTransferRule,
    MutualRecognition,
    DigitalTradeObligation,
    Source,
)
