import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_attendance_test"),
    "connection_timeout": 2,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE = "America/La_Paz"
ACCURACY_CEILING_M = 60.0
EVIDENCE_DIR = os.getenv("EVIDENCE_DIR", "var/test-evidence")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
