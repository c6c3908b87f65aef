"""
Data Transfer Objects for the application layer.
DTOs decouple internal domain models from external API contracts.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class ConversionResultDTO:
    """Result DTO for currency conversion."""
    base_currency: str
    target_currency: str
    amount: Decimal
    rate: Decimal
    converted_amount: Decimal
    valuation_date: date
    derived: bool = False


@dataclass
class LoadResultDTO:
    """Result DTO for a single feed load attempt."""
    feed: str
    success: bool
    days_added: int = 0
    days_loaded: int = 0
    error: Optional[str] = None


@dataclass
class ProviderStatusDTO:
    """Snapshot of what a rate provider currently holds."""
    feed: str
    provider: str
    base_currency: str
    days_loaded: int
    recent_day: Optional[date]
    last_days_added: int
    started: bool
