import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import Request

from checkout.money import minor_unit_exponent

# Force-load .env (Windows-safe, reload-safe)
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"


def _split_origins(value: str) -> List[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


@dataclass
class Settings:
    """Runtime configuration for the checkout service."""

    database_url: Optional[str] = None
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None

    currency: str = "inr"
    success_url: str = "http://localhost:3000/success"
    cancel_url: str = "http://localhost:3000/cancel"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    host: str = "0.0.0.0"
    port: int = 7000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(dotenv_path=ENV_PATH)
        return cls(
            database_url=os.getenv("DATABASE_URL"),
            stripe_secret_key=os.getenv("STRIPE_SECRET_KEY"),
            stripe_webhook_secret=os.getenv("STRIPE_WEBHOOK_SECRET"),
            currency=os.getenv("CHECKOUT_CURRENCY", "inr").lower(),
            success_url=os.getenv("CHECKOUT_SUCCESS_URL", "http://localhost:3000/success"),
            cancel_url=os.getenv("CHECKOUT_CANCEL_URL", "http://localhost:3000/cancel"),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "7000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def validate(self) -> None:
        """Raise RuntimeError if the service cannot start with these settings."""
        required = {
            "DATABASE_URL": self.database_url,
            "STRIPE_SECRET_KEY": self.stripe_secret_key,
            "STRIPE_WEBHOOK_SECRET": self.stripe_webhook_secret,
        }
        for name, value in required.items():
            if not value:
                raise RuntimeError(f"{name} is not set. Check your .env file.")

        try:
            minor_unit_exponent(self.currency)
        except ValueError as exc:
            raise RuntimeError(f"CHECKOUT_CURRENCY is invalid: {exc}") from exc


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
