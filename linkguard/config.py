import os

# -------- Preview fetch --------
PREVIEW_TIMEOUT_S = float(os.getenv("PREVIEW_TIMEOUT_S", "15"))  # outer deadline for one preview
FETCH_TIMEOUT_S = float(os.getenv("FETCH_TIMEOUT_S", "10"))  # per HTTP request
MAX_REDIRECTS = int(os.getenv("MAX_REDIRECTS", "3"))
MAX_RESPONSE_BYTES = int(os.getenv("MAX_RESPONSE_BYTES", "2000000"))
USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (iPhone; CPU iPhone OS 13_2_3 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/13.0.3 Mobile/15E148 Safari/604.1",
)

# -------- Preview cache --------
PREVIEW_CACHE_TTL_S = int(os.getenv("PREVIEW_CACHE_TTL_S", str(24 * 60 * 60)))
PREVIEW_CACHE_MAX_ENTRIES = int(os.getenv("PREVIEW_CACHE_MAX_ENTRIES", "1000"))
PREVIEW_CONCURRENCY = int(os.getenv("PREVIEW_CONCURRENCY", "8"))  # parallel fetches in resolve_many

# -------- Registries (JSON files extending the built-in tables) --------
PLATFORMS_FILE = os.getenv("LINKGUARD_PLATFORMS_FILE") or None
BLOCKLIST_FILE = os.getenv("LINKGUARD_BLOCKLIST_FILE") or None

# -------- Logging --------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
