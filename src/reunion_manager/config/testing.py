SECRET_KEY = "test-secret"

STORAGE_BACKEND = "memory"

DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "reunion_db_test",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

SESSION_DAYS = 7
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PASSWORD = "admin123"

SECTIONS = ["A", "B", "C", "D"]
EXPENSE_CATEGORIES = [
    "venue",
    "food",
    "entertainment",
    "decoration",
    "transportation",
    "gifts",
    "technology",
    "marketing",
    "miscellaneous",
]
REUNION_DATE = "2025-04-06"
PLANNING_DAYS = 365
