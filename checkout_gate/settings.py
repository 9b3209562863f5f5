import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    API_KEY: str = os.getenv("API_KEY", "")

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    # Checkout session records expire with the checkout; nothing survives across sessions.
    SESSION_TTL_SEC: int = int(os.getenv("SESSION_TTL_SEC", "86400"))

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # Capability probe (evaluated once at startup together with the store's own probe)
    CAN_UPDATE_ATTRIBUTES: bool = os.getenv("CAN_UPDATE_ATTRIBUTES", "true").lower() == "true"

    # Attribute store
    # - "redis": order attributes kept in a Redis hash
    # - "http": order attributes pushed to an external endpoint
    ATTRIBUTE_STORE_BACKEND: str = os.getenv("ATTRIBUTE_STORE_BACKEND", "redis").lower()
    ATTRIBUTE_STORE_URL: str = os.getenv("ATTRIBUTE_STORE_URL", "")
    ATTRIBUTE_STORE_TIMEOUT_SEC: float = float(os.getenv("ATTRIBUTE_STORE_TIMEOUT_SEC", "5.0"))
    ATTRIBUTE_KEY_PREFIX: str = os.getenv("ATTRIBUTE_KEY_PREFIX", "order:")

    # Security & Privacy
    ENABLE_PII_REDACTION: bool = os.getenv("ENABLE_PII_REDACTION", "true").lower() == "true"
    ADMIN_RBAC_ENABLED: bool = os.getenv("ADMIN_RBAC_ENABLED", "true").lower() == "true"
    ADMIN_API_KEY: str = os.getenv("ADMIN_API_KEY", "")

settings = Settings()
