"""Project-wide constants (expiration options, size limits, chunk size)."""

MINUTE_MS: int = 60 * 1000
HOUR_MS: int = 60 * MINUTE_MS
DAY_MS: int = 24 * HOUR_MS

EXPIRATION_OPTIONS: dict[str, int] = {
    "5min": 5 * MINUTE_MS,
    "30min": 30 * MINUTE_MS,
    "1hour": HOUR_MS,
    "6hours": 6 * HOUR_MS,
    "12hours": 12 * HOUR_MS,
    "1day": DAY_MS,
    "3days": 3 * DAY_MS,
    "7days": 7 * DAY_MS,
    "30days": 30 * DAY_MS,
}

DEFAULT_EXPIRATION_OPTION: str = "30min"

UPLOAD_SESSION_TTL_MS: int = 30 * MINUTE_MS

MAX_FILE_SIZE_BYTES: int = 500 * 1024 * 1024
MAX_TOTAL_FILES_SIZE_BYTES: int = 500 * 1024 * 1024
MAX_FILES: int = 20

# Multiple of 3 so every chunk but the last encodes to unpadded base64.
CHUNK_SIZE_BYTES: int = 3 * 1024 * 1024

CODE_LENGTH: int = 4
CODE_SPACE: int = 10 ** CODE_LENGTH
CODE_ALLOCATION_ATTEMPTS: int = 10

SWEEP_INTERVAL_SECONDS: int = 60

REDIS_KEY_PREFIX: str = "drop"

DEFAULT_SERVER_HOST: str = "localhost"
DEFAULT_SERVER_PORT: int = 8000
