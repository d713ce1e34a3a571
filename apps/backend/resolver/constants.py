"""Shared constants for the resolution pipeline."""

UNKNOWN_BRAND = "Unknown"

# Category bucket used when neither the source nor the display name supplies one
DEFAULT_CATEGORY = "sneakers"

# Results at or above this confidence are written to the cache
CACHE_CONFIDENCE_THRESHOLD = 0.5

DEFAULT_CACHE_TTL_DAYS = 30
DEFAULT_ADAPTER_TIMEOUT_SECONDS = 8.0

CACHE_SOURCE = "cache"

NO_MATCH_ERROR = "No match found"
