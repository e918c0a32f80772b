"""Application-wide constants.

These are fixed values that don't change between environments.
For configurable values, see config.py Settings.
"""

# ─────────────────────────────────────────────────────────────
# Pipeline
# ─────────────────────────────────────────────────────────────
PIPELINE_STEPS = (
    "research",
    "event-detection",
    "topic-decision",
    "script-generation",
    "script-review",
    "video-production",
    "brand-overlay",
    "upload",
)

# ─────────────────────────────────────────────────────────────
# Urgency scoring
# ─────────────────────────────────────────────────────────────
MIN_URGENCY_SCORE = 1
MAX_URGENCY_SCORE = 10
MIN_SENTENCE_LENGTH = 10  # Fragments this short or shorter are not sentences
CRITICAL_EVENT_URGENCY = 8  # Implied urgency that counts as breaking news

# Defaults (can be overridden in Settings)
DEFAULT_URGENCY_THRESHOLD = 7.0
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 5000
DEFAULT_MAX_RETRY_DELAY_MS = 60_000
DEFAULT_STATE_FILE_PATH = "./pipeline_state.json"
DEFAULT_SCHEDULE_TIMEZONE = "Asia/Dubai"

# ─────────────────────────────────────────────────────────────
# Content metadata
# ─────────────────────────────────────────────────────────────
BREAKING_NEWS_DURATION_SECONDS = 45
EDUCATIONAL_DURATION_SECONDS = 60
DEFAULT_PERSONA = "maha"
UNSCHEDULED_TIME = "unscheduled"
SLOT_HOUR_TOLERANCE = 1  # A publish slot matches within +/- this many hours
