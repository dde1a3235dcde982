SECRET_KEY = "test-secret"

API_CONFIG = {
    "base_url": "http://api.test/api",
    "timeout": 5,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

ITEMS_PER_PAGE = 5
SESSION_DAYS = 7
