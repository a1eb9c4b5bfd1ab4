import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./alc_ledger.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = bool(data.get("API_RELOAD", False))
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", True))

    # Store access
    STORE_TIMEOUT_SECONDS = float(data.get("STORE_TIMEOUT_SECONDS", 10.0))
    SQLITE_BUSY_TIMEOUT_SECONDS = float(data.get("SQLITE_BUSY_TIMEOUT_SECONDS", 30.0))

    # Wallet defaults
    WELCOME_BALANCE = int(data.get("WELCOME_BALANCE", 50))  # ALC granted on wallet creation

    # Subscription / daily question quota
    DEFAULT_PLAN = data.get("DEFAULT_PLAN", "free")
    PLAN_QUESTION_LIMITS = data.get(
        "PLAN_QUESTION_LIMITS",
        {"free": 25, "plus": 100, "premium": None, "vip": None},  # None = unlimited
    )

    # ALC cost per content-generation action
    ACTION_COSTS = data.get(
        "ACTION_COSTS",
        {"chat": 5, "image": 25, "code": 45, "video": 75},
    )

    # Rewarded ads
    AD_REWARD_AMOUNT = int(data.get("AD_REWARD_AMOUNT", 10))
    AD_COOLDOWN_MINUTES = int(data.get("AD_COOLDOWN_MINUTES", 180))
    AD_DAILY_CAP = int(data.get("AD_DAILY_CAP", 8))

    # Change feed
    CHANGE_WEBHOOK_URL = data.get("CHANGE_WEBHOOK_URL", None)
    CHANGE_FEED_QUEUE_SIZE = int(data.get("CHANGE_FEED_QUEUE_SIZE", 100))

    # Ledger Reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily
    RECONCILIATION_REPAIR_COUPONS = bool(data.get("RECONCILIATION_REPAIR_COUPONS", True))
