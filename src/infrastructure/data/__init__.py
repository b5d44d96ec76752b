"""
Market data infrastructure.

This module provides market data sources, validation, caching and the
technical indicators read by strategy rules.
"""

from .csv_source import CSVMarketDataSource
from .market_data_provider import MarketDataProvider
from .memory_source import InMemoryMarketDataSource
from .ohlcv_validator import OHLCVValidator
from .synthetic_source import SyntheticMarketDataSource
from .technical_indicators import TechnicalIndicatorsCalculator

__all__ = [
    "CSVMarketDataSource",
    "InMemoryMarketDataSource",
    "MarketDataProvider",
    "OHLCVValidator",
    "SyntheticMarketDataSource",
    "TechnicalIndicatorsCalculator",
]
