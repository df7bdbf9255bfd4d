# sales_api/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"

class Settings(BaseSettings):
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_DB: str = "transactions_db"
    POSTGRES_HOST: str = "localhost" # 'db' inside docker-compose, 'localhost' otherwise
    POSTGRES_PORT: str = "5432"

    DATABASE_URL: Optional[str] = None

    # Connection pool shared by every request
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 30

    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    SEED_URL: str = DEFAULT_SEED_URL
    SEED_ON_STARTUP: bool = True
    FETCH_TIMEOUT: int = 30

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def get_database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

settings = Settings()
