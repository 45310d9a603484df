import os

TARGET_LANG = os.environ.get("TRANSLATE_TARGET_LANG", "en")
SOURCE_LANG = os.environ.get("TRANSLATE_SOURCE_LANG", "auto")
PROVIDER = os.environ.get("TRANSLATE_PROVIDER", "google").strip().lower()
TRANSLATE_ENDPOINT = os.environ.get(
    "TRANSLATE_ENDPOINT", "https://translate.googleapis.com/translate_a/single"
)
HTTP_TIMEOUT = float(os.environ.get("TRANSLATE_TIMEOUT", 20.0))  # seconds
MAX_TEXT_CHARS = int(os.environ.get("TRANSLATE_MAX_CHARS", 4500))
FENCE_REQUESTS = os.environ.get("TRANSLATE_FENCE_REQUESTS", "false").strip().lower() in (
    "1",
    "true",
    "yes",
    "on",
)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

GENERIC_ERROR_MESSAGE = "Translation failed. Please try again."

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/118.0.0.0 Safari/537.36"
)
