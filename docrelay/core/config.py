from pathlib import Path
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class RelayConfig(BaseModel):
    """
    Immutable configuration handed to the upload pipeline and transfer client.
    """
    model_config = ConfigDict(frozen=True)

    bot_token: str
    chat_id: str
    api_base: str = "https://api.telegram.org"
    max_retries: int = 5
    base_timeout_ms: int = 60000
    base_backoff_ms: int = 2000
    strict_metadata_writes: bool = False


class Settings(BaseSettings):
    PROJECT_NAME: str = "Document Relay API"
    LOG_LEVEL: str = "INFO"
    PORT: int = 8005

    # Telegram settings; env names are case-insensitive so TG_Bot_Token also matches
    TG_BOT_TOKEN: str = ""
    TG_CHAT_ID: str = ""
    TELEGRAM_API_BASE: str = "https://api.telegram.org"

    # Retry policy
    MAX_RETRIES: int = 5
    BASE_TIMEOUT_MS: int = 60000  # attempt n waits BASE_TIMEOUT_MS * (n + 1)
    BASE_BACKOFF_MS: int = 2000  # delay after attempt n is BASE_BACKOFF_MS * 2 ** n

    # Metadata settings; no directory means metadata is not persisted
    METADATA_DIR: Optional[Path] = None
    STRICT_METADATA_WRITES: bool = False

    def relay_config(self) -> RelayConfig:
        return RelayConfig(
            bot_token=self.TG_BOT_TOKEN,
            chat_id=self.TG_CHAT_ID,
            api_base=self.TELEGRAM_API_BASE,
            max_retries=self.MAX_RETRIES,
            base_timeout_ms=self.BASE_TIMEOUT_MS,
            base_backoff_ms=self.BASE_BACKOFF_MS,
            strict_metadata_writes=self.STRICT_METADATA_WRITES,
        )

# Global settings instance
settings = Settings()
