import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


# Bitrix24 inbound webhook, e.g. https://example.bitrix24.com/rest/1/abcdef/
BITRIX_WEBHOOK_URL = os.getenv("BITRIX_WEBHOOK_URL")
BITRIX_LISTING_ENTITY_TYPE_ID = _int_env("BITRIX_LISTING_ENTITY_TYPE_ID", 1084)
BITRIX_LISTING_FIELD_PREFIX = os.getenv("BITRIX_LISTING_FIELD_PREFIX", "ufCrm37")
BITRIX_TIMEOUT_SECONDS = float(os.getenv("BITRIX_TIMEOUT_SECONDS", "10"))
BITRIX_MAX_RETRIES = _int_env("BITRIX_MAX_RETRIES", 3)

CACHE_TTL_SECONDS = _int_env("CACHE_TTL_SECONDS", 300)
CACHE_MAX_ENTRIES = _int_env("CACHE_MAX_ENTRIES", 10000)

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
