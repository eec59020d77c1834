"""
config.py
---------
Central configuration module. Loads the database settings from the .env
file (or the process environment) and exposes them as typed constants.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Backend selection ─────────────────────────────────────
# 'postgres' or 'mysql'; resolved once in main.py.
DB_BACKEND: str = os.getenv("DB_BACKEND", "postgres").strip().lower()

_DEFAULT_PORTS = {"postgres": "5432", "mysql": "3306"}

# ── Database ──────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", _DEFAULT_PORTS.get(DB_BACKEND, "5432")))
DB_NAME: str = os.getenv("DB_NAME", "appdb")
DB_USER: str = os.getenv("DB_USER", "postgres")
DB_PASS: str = os.getenv("DB_PASS", "")
DB_SSLMODE: str = os.getenv("DB_SSLMODE", "disable")
# CA bundle; required when DB_SSLMODE is verify-ca or verify-full.
DB_SSLROOTCERT: str = os.getenv("DB_SSLROOTCERT", "")

# ── Pool sizing ───────────────────────────────────────────
DB_POOL_MIN: int = int(os.getenv("DB_POOL_MIN", "1"))
DB_POOL_MAX: int = int(os.getenv("DB_POOL_MAX", "5"))
DB_POOL_TIMEOUT: float = float(os.getenv("DB_POOL_TIMEOUT", "30"))

# ── Logging ───────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
