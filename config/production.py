import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "emargements_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

PARTITION_WORKERS = int(os.getenv("PARTITION_WORKERS", "4"))
INSTITUTION_NAME = os.getenv("INSTITUTION_NAME", "")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
