import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_CONFIG = {
    "base_url": os.getenv("API_BASE_URL", "http://localhost:3000/api"),
    "timeout": float(os.getenv("API_TIMEOUT")) if os.getenv("API_TIMEOUT") else None,
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

ITEMS_PER_PAGE = int(os.getenv("ITEMS_PER_PAGE", "5"))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
