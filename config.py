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
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./authenticator.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))

    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_ALGORITHM = data.get("JWT_ALGORITHM", "HS256")
    SESSION_TOKEN_TTL_MINUTES = int(data.get("SESSION_TOKEN_TTL_MINUTES", 60))
    TWO_FACTOR_TOKEN_TTL_MINUTES = int(data.get("TWO_FACTOR_TOKEN_TTL_MINUTES", 5))

    PASSWORD_MIN_LENGTH = int(data.get("PASSWORD_MIN_LENGTH", 8))
    PASSWORD_RESET_TTL_MINUTES = int(data.get("PASSWORD_RESET_TTL_MINUTES", 10))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))

    TOTP_ISSUER = data.get("TOTP_ISSUER", "AuthenticatorApp")
    TOTP_VALID_WINDOW = int(data.get("TOTP_VALID_WINDOW", 2))

    # "console" logs reset codes instead of sending them
    EMAIL_BACKEND = data.get("EMAIL_BACKEND", "console")
    EMAIL_FROM = data.get("EMAIL_FROM", "no-reply@authenticator.local")
    SMTP_HOST = data.get("SMTP_HOST", "")
    SMTP_PORT = int(data.get("SMTP_PORT", 587))
    SMTP_USERNAME = data.get("SMTP_USERNAME", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_STARTTLS = bool(data.get("SMTP_STARTTLS", True))
