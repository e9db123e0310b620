# config.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ------------------ Security ------------------
SECRET_KEY = os.getenv("SECRET_KEY", "change-this-secret")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24))

# ------------------ Database ------------------
raw_db_url = os.getenv("DATABASE_URL")
# Enforce SSL on hosted Postgres
if raw_db_url and raw_db_url.startswith("postgres") and "sslmode=" not in raw_db_url:
    DATABASE_URL = raw_db_url + ("&" if "?" in raw_db_url else "?") + "sslmode=require"
else:
    DATABASE_URL = raw_db_url

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# ------------------ Push gateway ------------------
PUSH_GATEWAY_URL = os.getenv("PUSH_GATEWAY_URL", "https://exp.host/--/api/v2/push/send")
PUSH_TIMEOUT_SECONDS = float(os.getenv("PUSH_TIMEOUT_SECONDS", 10))

# ------------------ Logging ------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
