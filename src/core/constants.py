"""
Core constants and defaults.

Defines the numeric defaults used by indicators, strategy rules,
the simulation loop and the synthetic market data generator.
"""

# Indicator defaults
RSI_PERIOD = 14
RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0
RSI_NEUTRAL = 50.0
MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
MACD_SIGNAL_PERIOD = 9
SIMPLIFIED_MACD_SIGNAL_FACTOR = 0.9  # signal = macd * factor in simplified mode
BOLLINGER_PERIOD = 20
BOLLINGER_STD_MULTIPLIER = 2.0
SUPPORT_RESISTANCE_LOOKBACK = 50
MIN_INDICATOR_BARS = 14  # Fewer bars in the window yields neutral indicators

# Simulation loop
INDICATOR_WINDOW_SIZE = 50  # Bars preceding the current bar handed to rules
BREAKOUT_LOOKBACK = 20
MA_FAST_PERIOD = 20
MA_SLOW_PERIOD = 50
DEFAULT_MAX_HOLDING_HOURS = 24.0
SECONDS_PER_HOUR = 3600.0

# Volatility
TRADING_PERIODS_PER_YEAR = 252

# Synthetic market data
SYNTHETIC_BASE_PRICE = 1.0850
SYNTHETIC_MAX_STEP = 0.01  # +/-1% per bar
SYNTHETIC_MAX_WICK = 0.01  # High/low within 1% of close
SYNTHETIC_MIN_VOLUME = 500_000.0
SYNTHETIC_VOLUME_RANGE = 1_000_000.0
SYNTHETIC_DEFAULT_SEED = 42

# Data quality
EXTREME_MOVE_THRESHOLD = 0.5  # High/low range above 50% of low is flagged
MARKET_DATA_CACHE_SIZE = 64

# Request limits (mirrors the dashboard form validation)
MIN_INITIAL_CAPITAL = 1000.0
MAX_COMMISSION_PERCENT = 1.0
MIN_RISK_PERCENT = 0.1
MAX_RISK_PERCENT = 10.0
MAX_STOP_LOSS_PERCENT = 20.0
MAX_TAKE_PROFIT_PERCENT = 50.0

# Export
CSV_PRICE_DECIMALS = 5
CSV_AMOUNT_DECIMALS = 2
