from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./powderpro.db"
    COMPANY_NAME: str = "PowderPro Coatings"
    COMPANY_EMAIL: str = "info@powderpro.com"
    COMPANY_PHONE: str = ""

    # Auth
    JWT_SECRET: str = ""  # REQUIRED in production: fail loudly if missing at auth time
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRE_MINUTES: int = 60
    JWT_REFRESH_EXPIRE_DAYS: int = 30
    ADMIN_EMAILS: str = ""  # comma separated: these accounts register as admins

    # Contact form relay
    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 587
    SMTP_SECURE: bool = False
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    SMTP_FROM: str = "no-reply@powderpro.com"
    NOTIFICATION_EMAIL: str = "info@powderpro.com"

    # Pricing defaults: admins can override at runtime via /api/pricing/config
    PRICE_PER_UNIT_AREA: float = 0.15
    DIFFICULTY_PERCENTAGE: float = 0.0
    MATERIAL_MULTIPLIER: float = 1.0
    DIMENSION_UNIT: str = "in"

    class Config:
        env_file = ".env"

    @property
    def admin_emails(self) -> set:
        return {e.strip().lower() for e in self.ADMIN_EMAILS.split(",") if e.strip()}


settings = Settings()
