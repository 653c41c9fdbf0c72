"""Central configuration for the Ofinova checkout API."""
import os
from pathlib import Path

# Paths
ROOT = Path(__file__).resolve().parent.parent
TEMPLATES_DIR = ROOT / "contracts" / "templates"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Stripe (from env)
STRIPE_KEY = os.getenv("STRIPE_SECRET_KEY", "")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
STRIPE_API_VERSION = os.getenv("STRIPE_API_VERSION", "2024-06-20")
# IVA 21% tax rate from the Stripe dashboard
TAX_RATE_ID = os.getenv("STRIPE_TAX_RATE_ID", "txr_1S9RT93pToW48VXP6fB9vkUy")

# Redirect targets (front-end domains)
APP_BASE_URL = os.getenv("APP_BASE_URL", "https://spectacular-millions-373411.framer.app").rstrip("/")
SITE_URL = (os.getenv("SITE_URL") or os.getenv("APP_BASE_URL") or "https://ofinova-madrid.es").rstrip("/")

# CORS
DEFAULT_ALLOWED_ORIGINS = (
    "https://ofinova-madrid.es",
    "https://www.ofinova-madrid.es",
    "https://*.framer.app",
    "https://ofinova.vercel.app",
    "http://localhost:3000",
)
CORS_ALLOWED_ORIGINS = [
    s.strip()
    for s in os.getenv("CORS_ALLOWED_ORIGINS", ",".join(DEFAULT_ALLOWED_ORIGINS)).split(",")
    if s.strip()
]
CORS_DEFAULT_ORIGIN = os.getenv("CORS_DEFAULT_ORIGIN", "https://ofinova-madrid.es")

# Airtable
AIRTABLE_PAT = os.getenv("AIRTABLE_PAT", "")
AIRTABLE_BASE_ID = os.getenv("AIRTABLE_BASE_ID", "")
AIRTABLE_TABLE_ID = os.getenv("AIRTABLE_TABLE_ID", "")
AIRTABLE_API_URL = os.getenv("AIRTABLE_API_URL", "https://api.airtable.com/v0").rstrip("/")
AIRTABLE_TIMEOUT_S = float(os.getenv("AIRTABLE_TIMEOUT_S", "10"))

# Supabase storage
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE = os.getenv("SUPABASE_SERVICE_ROLE", "")
KYC_BUCKET = os.getenv("KYC_BUCKET", "kyc")
CONTRACTS_BUCKET = os.getenv("CONTRACTS_BUCKET", "contracts")
CONTRACT_URL_TTL_S = 7 * 24 * 3600

# KYC tokens
KYC_TOKEN_SECRET = os.getenv("KYC_TOKEN_SECRET", "")
KYC_TOKEN_MAX_AGE_S = int(os.getenv("KYC_TOKEN_MAX_AGE_S", str(14 * 24 * 3600)))
KYC_DEMO_TOKEN = os.getenv("KYC_DEMO_TOKEN", "")
KYC_ALLOWED_MIME = ("application/pdf", "image/jpeg", "image/png")
KYC_MAX_BYTES = 25 * 1024 * 1024

# Outbound automation hook (Make / Zapier)
AUTOMATION_WEBHOOK_URL = os.getenv("AUTOMATION_WEBHOOK_URL", "")
AUTOMATION_TIMEOUT_S = float(os.getenv("AUTOMATION_TIMEOUT_S", "3"))

# SMTP for contract delivery
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "")
SMTP_PASS = os.getenv("SMTP_PASS", "")
SMTP_FROM = os.getenv("SMTP_FROM", "contratos@ofinova-madrid.es")

# Business Logic
# landing "contract length" key -> months
PLAN_MONTHS = {"p3": 3, "p6": 6, "p12": 12, "p24": 24}

# monthly domiciliation prices (subscription only)
PRICE_DOMI_BY_PLAN = {
    "p3": os.getenv("STRIPE_PRICE_DOMI_23", ""),  # 23€/mo
    "p6": os.getenv("STRIPE_PRICE_DOMI_20", ""),  # 20€/mo
    "p12": os.getenv("STRIPE_PRICE_DOMI_17", ""),  # 17€/mo
    "p24": os.getenv("STRIPE_PRICE_DOMI_14", ""),  # 14€/mo
}

# monthly mail handling prices (subscription only)
PRICE_MAIL = {
    "lite": os.getenv("STRIPE_PRICE_MAIL_LITE_390", ""),  # 3.90€/mo
    "pro": os.getenv("STRIPE_PRICE_MAIL_PRO_990", ""),  # 9.90€/mo
}

# upfront payment, net of IVA, in cents
UPFRONT_PRICE_TABLE = {
    "p3": {"name": "Ofinova Domiciliación – 3 meses", "unit_amount": 6900},
    "p6": {"name": "Ofinova Domiciliación – 6 meses", "unit_amount": 12000},
    "p12": {"name": "Ofinova Domiciliación – 12 meses", "unit_amount": 20400},
    "p24": {"name": "Ofinova Domiciliación – 24 meses", "unit_amount": 33600},
}

# mail net monthly price in cents, billed months x unit on upfront payments
MAIL_NET_EUR_CENTS = {"lite": 390, "pro": 990}
MAIL_PLAN_LABELS = {"lite": "Mail Lite", "pro": "Mail Pro"}
