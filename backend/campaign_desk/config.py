"""
Centralized application configuration.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Campaign Desk"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite:///./campaign_desk.db"

    # JWT Authentication
    jwt_secret_key: str = "your-super-secret-key-change-in-production-min-32-chars"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Default admin created at startup when both are set
    admin_email: str = ""
    admin_password: str = ""

    # Razorpay
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_api_url: str = "https://api.razorpay.com/v1"
    razorpay_timeout_seconds: float = 30.0

    # Transactional email (HTTP mail API)
    mail_api_url: str = "https://api.resend.com"
    mail_api_key: str = ""
    mail_from: str = "Campaign Desk <noreply@campaigndesk.local>"
    support_email: str = "care@campaigndesk.local"

    # Invoicing
    invoice_company_name: str = "Campaign Desk"
    invoice_note: str = "This is a system generated invoice"

    # CORS
    cors_origins: str = "http://localhost:3000,http://localhost:5173"  # Comma-separated

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
