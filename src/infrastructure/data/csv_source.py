"""
CSV market data source.

Reads historical bars from ``<data_directory>/<symbol>/<timeframe>.csv``.
Symbols are sanitized into directory names by dropping every character that
is not alphanumeric, ``-`` or ``_`` (``EUR/USD`` becomes ``EURUSD``).
"""

import asyncio
import re
from datetime import datetime
from pathlib import Path

import pandas as pd
from loguru import logger

from src.core.enums import Timeframe
from src.core.exceptions.backtest import DataError, ValidationError
from src.core.interfaces.data import IMarketDataSource

from .ohlcv_utils import OHLCVUtils

_UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class CSVMarketDataSource(IMarketDataSource):
    """
    CSV-backed historical data source.

    Features:
    - One file per symbol and timeframe
    - Epoch-millisecond or ISO timestamps
    - Missing files are reported as "no data" rather than errors
    - Malformed files raise DataError
    """

    def __init__(self, data_directory: str | Path = "data"):
        self.data_dir = Path(data_directory)
        if not self.data_dir.exists():
            raise DataError(f"Data directory not found: {self.data_dir}")

    @staticmethod
    def sanitize_symbol(symbol: str) -> str:
        """Directory name for a symbol."""
        safe_symbol = _UNSAFE_PATH_CHARS.sub("", symbol)
        if not safe_symbol:
            raise ValidationError(f"Symbol cannot be mapped to a path: {symbol!r}")
        return safe_symbol

    def file_path(self, symbol: str, timeframe: Timeframe) -> Path:
        """Location of the CSV file for a symbol and timeframe."""
        return self.data_dir / self.sanitize_symbol(symbol) / f"{Timeframe(timeframe).value}.csv"

    def get_available_symbols(self) -> list[str]:
        """Directory names that contain data files."""
        return sorted(path.name for path in self.data_dir.iterdir() if path.is_dir())

    async def load_bars(
        self, symbol: str, timeframe: Timeframe, start_date: datetime, end_date: datetime
    ) -> pd.DataFrame:
        """Load bars for the date range.

        Raises:
            DataError: If the file exists but cannot be read or parsed
        """
        file_path = self.file_path(symbol, timeframe)
        if not file_path.exists():
            logger.warning(f"Missing data file for {symbol} {timeframe}: {file_path}")
            return OHLCVUtils.empty_frame()

        try:
            logger.debug(f"Loading file: {file_path}")
            df = await self._load_csv_from_disk(file_path)
            df = OHLCVUtils.normalize_timestamps(df)
        except pd.errors.EmptyDataError:
            logger.warning(f"Empty data file: {file_path}")
            return OHLCVUtils.empty_frame()
        except (DataError, ValidationError):
            raise
        except (OSError, pd.errors.ParserError, ValueError, UnicodeDecodeError) as e:
            logger.error(f"CSV loading failed ({type(e).__name__}) for {file_path.name}: {e}")
            raise DataError(f"Failed to load CSV file: {file_path.name}") from e

        filtered = OHLCVUtils.filter_by_date_range(df, start_date, end_date)
        logger.info(f"Loaded {len(filtered)} rows for {symbol} {timeframe} from {file_path.name}")
        return filtered

    async def _load_csv_from_disk(self, file_path: Path) -> pd.DataFrame:
        """Read the CSV file in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, pd.read_csv, file_path)
