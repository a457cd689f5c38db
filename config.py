# config.py
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent

# Shop identity, printed on invoices and share text
SHOP_NAME: str = os.getenv("SHOP_NAME", "BACDEPZAI")
SHOP_TAGLINE: str = os.getenv("SHOP_TAGLINE", "Vật tư in nhanh")

# Item names containing one of these keywords are priced per m²
AREA_KEYWORDS = tuple(
    k.strip() for k in os.getenv("AREA_KEYWORDS", "giấy,paper").split(",") if k.strip()
)

# Local persistence (stand-in for browser local storage)
DATA_DIR = Path(os.getenv("DATA_DIR", str(BASE_DIR / "data")))
HISTORY_FILE: str = os.getenv("HISTORY_FILE", "bacdepzai_store.json")

PIN_SALT: str = os.getenv("PIN_SALT", "bacdepzai_salt_2025")

# AI assistant
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# Spreadsheet web-hook (Google Apps Script "exec" URL)
SHEET_WEBHOOK_URL = os.getenv("SHEET_WEBHOOK_URL")
SHEET_WEBHOOK_TIMEOUT = float(os.getenv("SHEET_WEBHOOK_TIMEOUT", "10"))

LOG_DIR: str = os.getenv("LOG_DIR", str(BASE_DIR / "logs"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
