import os

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/smartfeast_db")

# Application Metadata
PROJECT_NAME = "SmartFeast Ordering Platform"
VERSION = "1.0.0"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Bearer credentials (issued by the auth service, verified here)
JWT_SECRET = os.getenv("JWT_SECRET", "dev_secret_change_me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))

# Shared secret presented by the payment webhook caller in X-Service-Key
PAYMENT_SERVICE_KEY = os.getenv("PAYMENT_SERVICE_KEY", "dev_payment_key_change_me")

# Business limits
DEFAULT_OUTLET_LIMIT = int(os.getenv("DEFAULT_OUTLET_LIMIT", 3))
ORDER_NUMBER_MAX_ATTEMPTS = int(os.getenv("ORDER_NUMBER_MAX_ATTEMPTS", 10))
