from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///inventoryManager.db"
    SQL_ECHO: bool = False
    DEBUG: bool = False

    LOG_FILE: str = "logs/app.log"
    LOG_LEVEL: str = "INFO"

    PAGE_SIZE: int = 20
    DEFAULT_CATEGORY: str = "Others"
    ENFORCE_GST_SLABS: bool = False
    CURRENCY_SYMBOL: str = "₹"

    class Config:
        env_file = ".env"

settings = Settings()
