from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    BUSINESS_NAME: str = "Shalean Cleaning Services"
    BUSINESS_TIMEZONE: str = "Africa/Lagos"

    DRAFT_STORE_DIR: str = "./data/drafts"

    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None

    BOOKING_API_URL: str | None = None
    BOOKING_API_TOKEN: str | None = None

    PAYSTACK_SECRET_KEY: str | None = None
    PAYSTACK_BASE_URL: str = "https://api.paystack.co"
    PAYSTACK_CALLBACK_URL: str | None = None
    PAYMENT_CURRENCY: str = "NGN"

    BOOKING_WINDOW_DAYS: int = 90
    SUBMISSION_MAX_ATTEMPTS: int = 3
    SUBMISSION_BACKOFF_SECONDS: float = 1.0
    WIZARD_REGISTRY_SIZE: int = 1000
    WIZARD_IDLE_SECONDS: int = 3600
    HTTP_TIMEOUT_SECONDS: float = 10.0


settings = Settings()
