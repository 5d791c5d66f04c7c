import os

from . import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "mysql" for the durable store, "memory" for a throwaway in-process store
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "reunion_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
DEFAULT_ADMIN_USERNAME = os.getenv("DEFAULT_ADMIN_USERNAME", "admin")
DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

SECTIONS = env_list("SECTIONS", "A,B,C,D")
EXPENSE_CATEGORIES = env_list(
    "EXPENSE_CATEGORIES",
    "venue,food,entertainment,decoration,transportation,gifts,technology,marketing,miscellaneous",
)
REUNION_DATE = os.getenv("REUNION_DATE", "2025-04-06")
PLANNING_DAYS = int(os.getenv("PLANNING_DAYS", "365"))
