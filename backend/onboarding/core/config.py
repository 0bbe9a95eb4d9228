import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"

    TALENOX_API_URL: str = ""
    TALENOX_API_KEY: str = ""
    TALENOX_TIMEOUT_SECONDS: int = 30

    RESEND_API_KEY: str = ""
    RESEND_API_URL: str = "https://api.resend.com"
    NOTIFY_EMAIL: str = ""
    FROM_EMAIL: str = "Tinkercademy Onboarding <hr.onboarding@tinkertanker.com>"
    HR_CONTACT_EMAIL: str = "hr.onboarding@tinkertanker.com"

    # Comma-separated list; empty means "allow all" outside production
    ALLOWED_ORIGINS: str = ""

    EMPLOYEE_ID_CEILING: int = 10000
    EMPLOYEE_ID_FALLBACK: str = "301"

    DEDUP_TTL_SECONDS: int = 300

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def allowed_origins(self) -> list[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        if origins:
            return origins
        if self.is_production:
            return []
        return ["*"]


settings = Settings()
