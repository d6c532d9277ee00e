import os
import logging
from dotenv import load_dotenv

# Load .env (VS Code terminals sometimes don't inject env vars)
load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
MAIL_FROM = os.getenv("MAIL_FROM", "orders@localhost")

NOTIFY_MAX_ATTEMPTS = max(int(os.getenv("NOTIFY_MAX_ATTEMPTS", "3")), 1)
NOTIFY_RETRY_DELAY = float(os.getenv("NOTIFY_RETRY_DELAY", "0.5"))


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
