from pydantic_settings import BaseSettings, SettingsConfigDict


_INSECURE_SECRET = "change-me"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "HR-HUB"
    ENVIRONMENT: str = "development"
    API_PREFIX: str = "/api/v1"

    DATABASE_URL: str = "sqlite+pysqlite:///./hrhub.db"

    SECRET_KEY: str = _INSECURE_SECRET
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480
    SESSION_COOKIE_NAME: str = "hrhub_session"
    SESSION_COOKIE_SECURE: bool = False

    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    REDIS_URL: str = ""
    CACHE_PERMISSIONS_TTL: int = 600

    S3_ACCESS_KEY_ID: str = ""
    S3_SECRET_ACCESS_KEY: str = ""
    S3_REGION: str = "ap-northeast-2"
    S3_BUCKET: str = "hr-hub"
    S3_ENDPOINT: str = ""
    S3_PRESIGN_EXPIRES_SEC: int = 3600

    ANTHROPIC_API_KEY: str = ""
    OPENAI_API_KEY: str = ""

    CRON_SECRET: str = ""

    SUPERADMIN_USERNAME: str = "superadmin"
    SUPERADMIN_EMAIL: str = "superadmin@example.com"
    SUPERADMIN_PASSWORD: str = _INSECURE_SECRET

    METRICS_ENABLED: bool = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.strip().lower() == "production"


class ConfigurationError(RuntimeError):
    pass


def validate_settings(current: Settings) -> None:
    """Fail fast on missing required configuration in production.

    Optional integrations (cache, storage, AI keys) are left to degrade at
    their call sites.
    """
    if not current.is_production:
        return
    missing = []
    if not current.DATABASE_URL:
        missing.append("DATABASE_URL")
    if not current.SECRET_KEY or current.SECRET_KEY == _INSECURE_SECRET:
        missing.append("SECRET_KEY")
    if missing:
        raise ConfigurationError(f"missing required settings: {', '.join(missing)}")


settings = Settings()
