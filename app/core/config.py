from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "local"

    DATABASE_URL: Optional[str] = None
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    DB_NAME: str = "storefront"

    SESSION_SECRET: Optional[str] = None
    SESSION_SECRET_PREVIOUS: Optional[str] = None
    SESSION_COOKIE_NAME: str = "storefront.sid"
    SESSION_MAX_AGE: int = 60 * 60 * 24 * 7
    SESSION_SECRET_ROTATION_SECONDS: int = 60 * 15

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def SQLALCHEMY_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg2://"
            f"{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}"
            f"/{self.DB_NAME}"
        )

    @property
    def REQUIRE_SESSION_SECRET(self) -> bool:
        return self.ENV == "production"


settings = Settings()
