import os
from typing import Optional

from pydantic import BaseModel


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "development")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    email_user: Optional[str] = os.getenv("EMAIL_USER")
    email_pass: Optional[str] = os.getenv("EMAIL_PASS")
    business_email: Optional[str] = os.getenv("BUSINESS_EMAIL")
    business_name: str = os.getenv("BUSINESS_NAME", "J & L Climate Co.")
    smtp_host: str = os.getenv("SMTP_HOST", "smtp.gmail.com")
    smtp_port: int = int(os.getenv("SMTP_PORT", "465"))
    smtp_use_tls: bool = os.getenv("SMTP_USE_TLS", "true").lower() == "true"
    mail_timeout_seconds: float = float(os.getenv("MAIL_TIMEOUT_SECONDS", "30"))
    send_notifications: bool = os.getenv("SEND_NOTIFICATIONS", "true").lower() == "true"
    cors_origins: list[str] = _split_origins(os.getenv("CORS_ORIGINS", "*"))
    slot_policy: str = os.getenv("SLOT_POLICY", "weekly")
    business_timezone: Optional[str] = os.getenv("BUSINESS_TIMEZONE")
    appointment_minutes: int = int(os.getenv("APPOINTMENT_MINUTES", "60"))

    @property
    def business_inbox(self) -> Optional[str]:
        # Notifications go to the sender mailbox unless a separate inbox is set.
        return self.business_email or self.email_user

    @property
    def mail_configured(self) -> bool:
        return bool(self.email_user and self.email_pass)


settings = Settings()
