import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Punches are grouped into days and months in this zone
TIMEZONE = os.getenv("TIMEZONE", "America/Sao_Paulo")
DEFAULT_EXPECTED_DAILY_MINUTES = int(os.getenv("DEFAULT_EXPECTED_DAILY_MINUTES", "480"))
PROGRESS_CAP_PERCENT = int(os.getenv("PROGRESS_CAP_PERCENT", "150"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create demo users on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
