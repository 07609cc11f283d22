from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Config(BaseSettings):
    APP_NAME: str = "pushgate"
    DEBUG: bool = False

    # Redis key namespace for the per-session window counters
    PUSH_RATE_KEY_PREFIX: str = "push_rate"

    # Fallback caps for sessions without stored preferences
    DEFAULT_MAX_PER_MINUTE: int = 10
    DEFAULT_MAX_PER_HOUR: int = 60

    DEFAULT_QUIET_HOURS_TIMEZONE: str = "UTC"

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def log_level(self) -> str:
        return "DEBUG" if self.DEBUG else "INFO"


config = Config()
