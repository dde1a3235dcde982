import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:3000/api"),
    # seconds; unset means wait for the server indefinitely
    "timeout": float(os.getenv("API_TIMEOUT")) if os.getenv("API_TIMEOUT") else None,
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

ITEMS_PER_PAGE = int(os.getenv("ITEMS_PER_PAGE", "5"))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
