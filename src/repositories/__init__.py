# src/repositories/__init__.py

from .deal_repository import (
    DealRepository,
    InMemoryDealRepository,
    JsonFileDealRepository,
    new_deal_id,
)

__all__ = [
    "DealRepository",
    "InMemoryDealRepository",
    "JsonFileDealRepository",
    "new_deal_id",
]
