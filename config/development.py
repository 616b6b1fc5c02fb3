import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_attendance"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Civil calendar used for day buckets and schedule comparisons
TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", "America/La_Paz")
# Fixes reporting a worse accuracy than this (meters) are refused
ACCURACY_CEILING_M = float(os.getenv("ACCURACY_CEILING_M", "60"))
# Selfie evidence lands under this directory as site/person/epochms.jpg
EVIDENCE_DIR = os.getenv("EVIDENCE_DIR", "var/evidence")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo sites and people on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
