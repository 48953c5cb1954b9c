import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./rental.db")
    MIGRATION_DB_URI = data.get("MIGRATION_DB_URI", "sqlite:///./rental.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", 0))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    # Payment gateway (Stripe)
    STRIPE_SECRET_KEY = data.get("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET = data.get("STRIPE_WEBHOOK_SECRET", "")
    PAYMENT_CURRENCY = data.get("PAYMENT_CURRENCY", "USD")
    PAYMENT_TIMEOUT_SECONDS = data.get("PAYMENT_TIMEOUT_SECONDS", 30)
    PAYMENT_MAX_ATTEMPTS = data.get("PAYMENT_MAX_ATTEMPTS", 3)
    PAYMENT_RETRY_BASE_DELAY = data.get("PAYMENT_RETRY_BASE_DELAY", 0.5)  # Seconds
    PAYMENT_RETRY_MAX_DELAY = data.get("PAYMENT_RETRY_MAX_DELAY", 8.0)  # Seconds
    REFUND_ALERT_WEBHOOK = data.get("REFUND_ALERT_WEBHOOK", None)

    # Vehicle status projection refresh
    INVENTORY_SYNC_ENABLED = bool(data.get("INVENTORY_SYNC_ENABLED", True))
    INVENTORY_SYNC_INTERVAL_SECONDS = data.get("INVENTORY_SYNC_INTERVAL_SECONDS", 3600)  # Hourly
    PENDING_PAYMENT_TTL_MINUTES = data.get("PENDING_PAYMENT_TTL_MINUTES", 30)

    # Rental contract PDF header
    CONTRACT_COMPANY_NAME = data.get("CONTRACT_COMPANY_NAME", "Rental Marketplace")
    CONTRACT_COMPANY_ADDRESS = data.get(
        "CONTRACT_COMPANY_ADDRESS", "1 Fleet Street, Motor City, MC 10001"
    )
