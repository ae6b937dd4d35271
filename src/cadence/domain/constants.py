"""Centralized constants for the cadence scheduling core.

Every default and unit conversion lives here so each layer imports from a
single source of truth.
"""

# ---------- Step ladders ----------
DEFAULT_LEARNING_STEPS = (1.0, 10.0)  # minutes
DEFAULT_RELEARNING_STEPS = (10.0,)  # minutes
DEFAULT_GRADUATING_INTERVAL_DAYS = 1.0
DEFAULT_EASY_INTERVAL_DAYS = 4.0
MIN_GRADUATION_DAYS = 1.0
MAX_INTERVAL_DAYS = 36500.0  # upper bound for steps and graduation intervals

# ---------- Time units ----------
MINUTES_PER_DAY = 24 * 60
MS_PER_MINUTE = 60 * 1000
MS_PER_DAY = MINUTES_PER_DAY * MS_PER_MINUTE
SECONDS_PER_DAY = 86400.0

# ---------- Memory model ----------
DEFAULT_DESIRED_RETENTION = 0.9
DEFAULT_MAXIMUM_INTERVAL = 36500  # days
DIFFICULTY_MIN = 1.0
DIFFICULTY_MAX = 10.0

# ---------- Config files ----------
CONFIG_ENV_PREFIX = "CADENCE_"
CONFIG_DIR_NAME = "cadence"
