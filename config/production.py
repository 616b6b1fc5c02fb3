import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "attendance"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "site_attendance"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "5")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

TIMEZONE = os.getenv("ATTENDANCE_TIMEZONE", "America/La_Paz")
ACCURACY_CEILING_M = float(os.getenv("ACCURACY_CEILING_M", "60"))
EVIDENCE_DIR = os.getenv("EVIDENCE_DIR", "/var/lib/site-attendance/evidence")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
