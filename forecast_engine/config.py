"""
Configuration file for the demand forecast engine
Contains smoothing constants, detection thresholds, and stock parameters
"""

# ============================================================================
# DATA REQUIREMENTS
# ============================================================================

# Minimum observations needed to produce any forecast
MIN_OBSERVATIONS = 3

# Default and maximum forecast horizon (periods)
DEFAULT_FORECAST_PERIODS = 6
MAX_FORECAST_PERIODS = 120

# ============================================================================
# EXPONENTIAL SMOOTHING (Holt-Winters)
# ============================================================================

# Fixed smoothing constants (not auto-tuned)
SMOOTHING_ALPHA = 0.3   # level
SMOOTHING_BETA = 0.1    # trend
SMOOTHING_GAMMA = 0.1   # seasonal

# Season length used when no cycle is detected
DEFAULT_SEASON_LENGTH = 12

# ============================================================================
# SEASONALITY DETECTION
# ============================================================================

# Series shorter than this are never scanned
SEASONALITY_MIN_OBSERVATIONS = 24

# Candidate lag window (inclusive); the upper bound is also capped at n // 2
SEASONALITY_MIN_LAG = 7
SEASONALITY_MAX_LAG = 24

# Autocorrelation must exceed this to count as a seasonal cycle
SEASONALITY_THRESHOLD = 0.3

# ============================================================================
# TREND ASSESSMENT
# ============================================================================

# |slope| below this fraction of the mean is reported as stable
TREND_STABLE_RATIO = 0.01

# ============================================================================
# ENSEMBLE
# ============================================================================

# Exponential / linear weights
SEASONAL_WEIGHTS = (0.7, 0.3)
NON_SEASONAL_WEIGHTS = (0.5, 0.5)

# Confidence band around the blended point estimate
LOWER_BOUND_FACTOR = 0.85
UPPER_BOUND_FACTOR = 1.15

# ============================================================================
# BACKTEST
# ============================================================================

# Share of the most recent history held out for accuracy evaluation
HOLDOUT_FRACTION = 0.2

# ============================================================================
# STOCK RECOMMENDATION
# ============================================================================

# z-score for ~95% one-sided service level
SERVICE_LEVEL_Z = 1.65

# Target stock covers this multiple of the peak projected demand
TARGET_STOCK_MULTIPLIER = 1.5

# Rationale template; replace to localize (all fields are plain data)
RATIONALE_TEMPLATE = (
    "Based on {history_periods} historical periods. "
    "Trend: {trend_direction} ({trend_confidence:.0f}% confidence). "
    "Seasonality: {seasonality}. "
    "Average projected demand: {average_demand:.1f} units per period. "
    "Backtest MAPE: {mape:.1f}%."
)

# Rendered in place of the seasonal period when no cycle is detected
NO_SEASONALITY_LABEL = "none detected"
SEASONALITY_LABEL_TEMPLATE = "every {period} periods"

# ============================================================================
# BATCH RANKING
# ============================================================================

# joblib workers for per-product forecasts (1 = sequential)
BATCH_N_JOBS = 1
