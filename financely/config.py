"""
config.py

Central configuration for the insight engine and the dashboard.
Tunable parameters live here so behaviour can be changed without
touching the pipeline code. Values marked (env) can be overridden
through the environment or a local .env file.
"""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Which Gemini model answers chat questions (env: FINANCELY_MODEL_NAME)
MODEL_NAME: str = os.getenv("FINANCELY_MODEL_NAME", "gemini-2.5-flash")

# Currency used in every rendered amount
CURRENCY_SYMBOL: str = "₹"

# How many categories the context keeps in its ranking
TOP_CATEGORY_LIMIT: int = 5

# How many of the latest transactions are kept for prompts
RECENT_TRANSACTION_LIMIT: int = 10

# Weight of the month-over-month delta in the expense forecast
TREND_DAMPING: float = 0.3

# Savings rate (percent) considered healthy
TARGET_SAVINGS_RATE: float = 20.0

# Snapshot document loaded by the dashboard (env: FINANCELY_SNAPSHOT)
SNAPSHOT_PATH: str = os.getenv("FINANCELY_SNAPSHOT", "data/snapshot.json")

# Root log level for the dashboard process (env: FINANCELY_LOG_LEVEL)
LOG_LEVEL: str = os.getenv("FINANCELY_LOG_LEVEL", "INFO")


def get_api_key() -> Optional[str]:
    """Return GEMINI_API_KEY, or None when it is unset or blank."""
    key = os.getenv("GEMINI_API_KEY", "").strip()
    return key or None
