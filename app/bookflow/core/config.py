from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


# The ledger upserts and the open-request partial index exist only on these.
SUPPORTED_DATABASE_BACKENDS = ("sqlite", "postgresql")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env")

    APP_NAME: str = "BOOKFLOW"
    DATABASE_URL: str = "sqlite+pysqlite:///./bookflow.db"
    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 200
    # Off keeps the historical behaviour: any school id is accepted on create.
    BOOK_REQUESTS_REQUIRE_APPROVED_SCHOOL: bool = False

    @field_validator("DATABASE_URL")
    @classmethod
    def _check_backend(cls, value: str) -> str:
        backend = make_url(value).get_backend_name()
        if backend not in SUPPORTED_DATABASE_BACKENDS:
            raise ValueError(
                f"unsupported database backend {backend!r}; use one of {', '.join(SUPPORTED_DATABASE_BACKENDS)}"
            )
        return value


settings = Settings()
