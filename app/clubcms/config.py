import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()


def _env(*names: str, default: Optional[str] = None) -> Optional[str]:
    for name in names:
        raw = os.getenv(name)
        if raw is not None and raw.strip() != "":
            return raw.strip()
    return default


def _database_url() -> str:
    url = _env("DATABASE_URL")
    if url:
        return url

    # Same variables the postgres deployment has always used.
    db_host = _env("DB_HOST")
    if db_host:
        db_user = _env("DB_USER", default="")
        db_password = _env("DB_PASSWORD", default="")
        db_port = _env("DB_PORT", default="5432")
        db_name = _env("DB_NAME", default="")
        return f"postgresql+psycopg2://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"

    return "sqlite:///./clubcms.sqlite"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Secrets (admin secret, JWT secret, SMTP password) have no defaults and
    must come from the environment or a .env file.
    """

    # -----------------
    # Admin identity
    # -----------------
    admin_email: Optional[str] = field(default_factory=lambda: _env("ADMIN_EMAIL", "CLUB_EMAIL"))
    # Preferred: a passlib hash produced by create_admin.py.
    admin_secret_hash: Optional[str] = field(default_factory=lambda: _env("ADMIN_SECRET_HASH"))
    # Plaintext fallback, hashed once when the app is built.
    admin_secret: Optional[str] = field(default_factory=lambda: _env("ADMIN_SECRET"))

    # -----------------
    # Tokens / OTP
    # -----------------
    jwt_secret: Optional[str] = field(default_factory=lambda: _env("JWT_SECRET"))
    token_expire_minutes: int = field(default_factory=lambda: int(_env("TOKEN_EXPIRE_MINUTES", default="60")))
    otp_expire_minutes: int = field(default_factory=lambda: int(_env("OTP_EXPIRE_MINUTES", default="10")))
    otp_store: str = field(default_factory=lambda: _env("OTP_STORE", default="memory").lower())
    redis_url: Optional[str] = field(default_factory=lambda: _env("REDIS_URL"))

    # -----------------
    # Mail
    # -----------------
    smtp_host: str = field(default_factory=lambda: _env("SMTP_HOST", default="smtp.gmail.com"))
    smtp_port: int = field(default_factory=lambda: int(_env("SMTP_PORT", default="587")))
    smtp_password: Optional[str] = field(default_factory=lambda: _env("CLUB_EMAIL_APP_PASSWORD", "SMTP_PASSWORD"))
    mail_sender: Optional[str] = field(default_factory=lambda: _env("MAIL_SENDER", "CLUB_EMAIL", "ADMIN_EMAIL"))
    club_name: str = field(default_factory=lambda: _env("CLUB_NAME", default="Club"))

    # -----------------
    # Storage
    # -----------------
    database_url: str = field(default_factory=_database_url)
    upload_dir: str = field(default_factory=lambda: _env("UPLOAD_DIR", default="./uploads"))
    max_upload_bytes: int = field(default_factory=lambda: int(_env("MAX_UPLOAD_BYTES", default=str(5 * 1024 * 1024))))

    # -----------------
    # HTTP
    # -----------------
    api_prefix: str = field(default_factory=lambda: _env("API_PREFIX", default="/api"))
    cors_allow_origins: str = field(default_factory=lambda: _env("CORS_ALLOW_ORIGINS", default="*"))
    host: str = field(default_factory=lambda: _env("HOST", default="0.0.0.0"))
    port: int = field(default_factory=lambda: int(_env("PORT", default="5000")))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", default="INFO"))

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
