import os
from dotenv import load_dotenv

load_dotenv()

def normalize_db_url(raw: str) -> str:
    if raw.startswith("postgres://"):
        return raw.replace("postgres://", "postgresql+psycopg://", 1)
    if raw.startswith("postgresql://") and not raw.startswith("postgresql+psycopg://"):
        return raw.replace("postgresql://", "postgresql+psycopg://", 1)
    return raw


def _split_env(name: str, default: str) -> list[str]:
    return [v.strip() for v in os.getenv(name, default).split(",") if v.strip()]


class Config:
    SECRET_KEY = os.getenv("SUPABASE_JWT_SECRET")
    JWT_SECRET_KEY = os.getenv("SUPABASE_JWT_SECRET")
    # Supabase-Tokens tragen aud=authenticated
    JWT_DECODE_AUDIENCE = os.getenv("JWT_AUDIENCE") or None

    raw_db = os.getenv("DATABASE_URL", "")
    if raw_db:
        SQLALCHEMY_DATABASE_URI = normalize_db_url(raw_db)
    else:
        SQLALCHEMY_DATABASE_URI = "sqlite:///tango_berlin.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # --- Cloudinary (Bild-Hosting) ---
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
    CLOUDINARY_TIMEOUT = float(os.getenv("CLOUDINARY_TIMEOUT", "10"))
    # Beim endgültigen Löschen eines Events auch dessen Bilder bei Cloudinary entfernen
    PURGE_REMOTE_IMAGES = os.getenv("PURGE_REMOTE_IMAGES", "true").lower() in {"1", "true", "yes"}

    # --- Sprachen ---
    DEFAULT_LOCALE = os.getenv("DEFAULT_LOCALE", "es")
    SUPPORTED_LOCALES = _split_env("SUPPORTED_LOCALES", "es,en,de")

    CORS_ORIGINS = _split_env("CORS_ORIGINS", "")

    # --- Swagger / OpenAPI Settings ---
    SWAGGER = {
        "title": "Tango Berlin API",
        # Use Swagger UI v3 to render OpenAPI 3 specs
        "uiversion": 3,
        "openapi": "3.0.3",
        "specs": [
            {
                "endpoint": "apispec_1",
                "route": "/apispec_1.json",
            }
        ],
        "specs_route": "/api-docs/",
    }


class TestConfig(Config):
    """Konfiguration für Tests mit In-Memory-Datenbank."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    SECRET_KEY = JWT_SECRET_KEY
    JWT_DECODE_AUDIENCE = None
    CLOUDINARY_CLOUD_NAME = "demo-cloud"
    CLOUDINARY_API_KEY = "1234567890"
    CLOUDINARY_API_SECRET = "test-api-secret"
    PURGE_REMOTE_IMAGES = False
