"""
Centralized configuration — env vars, scoring constants, taxonomies.
"""
import os

from leadwell.errors import ConfigurationError


# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

# ── Flask ─────────────────────────────────────────────────────────────────────
SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')

# ── Storage ───────────────────────────────────────────────────────────────────
# "sql" for the relational store, "memory" for the in-process arena
STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'sql')
STORAGE_BACKENDS = ('sql', 'memory')

# ── PostgreSQL / SQLite ───────────────────────────────────────────────────────
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///local.db')

# ── Redis (circuit breaker state) ─────────────────────────────────────────────
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379/0')

# ── OpenAI ────────────────────────────────────────────────────────────────────
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o')
OPENAI_TIMEOUT_SECONDS = float(os.getenv('OPENAI_TIMEOUT_SECONDS', '30'))

# ── Qualification ─────────────────────────────────────────────────────────────
# Strict inequality: a score of exactly 70 is not auto-qualified at intake
QUALIFICATION_THRESHOLD = 70
# Insight generator counts score >= this as qualified
INSIGHT_QUALIFIED_SCORE = 70

DEFAULT_CALL_DURATION = 30
# Upper bound of the 32-bit integer budget columns
BUDGET_MAX = 2_147_483_647
INSIGHT_LEAD_WINDOW = 100
INSIGHT_MODEL_SAMPLE = 10
INSIGHT_MODEL_COUNT = 3

# ── Taxonomies ────────────────────────────────────────────────────────────────
PROJECT_TYPES = [
    'Residential Renovation',
    'Commercial Office',
    'Industrial Facility',
    'Residential New Build',
    'Other',
]

# Types and icons the model may choose from
MODEL_INSIGHT_TYPES = ['trend', 'quality', 'schedule', 'opportunity']
MODEL_INSIGHT_ICONS = [
    'ri-robot-line',
    'ri-calendar-check-line',
    'ri-building-line',
    'ri-line-chart-line',
]

WEBSITE_SOURCE_ICON = 'ri-global-line'


def validate_config():
    """
    Fail fast on missing or invalid settings.

    Called from create_app() so a misconfigured process never starts serving.
    """
    if not OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY is not set — the reasoning client cannot start")
    if STORAGE_BACKEND not in STORAGE_BACKENDS:
        raise ConfigurationError(
            f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)} (got '{STORAGE_BACKEND}')"
        )
