# barbershop/config.py

import os
import warnings
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barber.db")

# Shop
SHOP_NAME = os.getenv("SHOP_NAME", "Ze Elias Barbershop")
SHOP_TIMEZONE = os.getenv("SHOP_TIMEZONE", "Asia/Nicosia")

# Business hours: 9 AM - 7 PM, closed Sunday (0) and Thursday (4)
OPEN_HOUR = int(os.getenv("OPEN_HOUR", "9"))
CLOSE_HOUR = int(os.getenv("CLOSE_HOUR", "19"))
SLOT_MINUTES = int(os.getenv("SLOT_MINUTES", "60"))  # 60 or 30
CLOSED_DAYS = frozenset(
    int(day) for day in os.getenv("CLOSED_DAYS", "0,4").split(",") if day.strip()
)

# Verification codes
CODE_TTL_MINUTES = int(os.getenv("CODE_TTL_MINUTES", "10"))

# Twilio
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")
SMS_TIMEOUT_SECONDS = float(os.getenv("SMS_TIMEOUT_SECONDS", "10"))

# Admin auth
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
ADMIN_TOKEN_EXPIRE_MINUTES = int(os.getenv("ADMIN_TOKEN_EXPIRE_MINUTES", "60"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
