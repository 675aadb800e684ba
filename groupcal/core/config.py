from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DISCORD_BOT_TOKEN: str | None = None
    DISCORD_API_BASE: str = "https://discord.com/api/v10"
    RELAY_SHARED_SECRET: str | None = None

    HISTORY_LOOKBACK_DAYS: int = 7
    HISTORY_PAGE_SIZE: int = 100

    RESOLVER_LANGUAGES: list[str] = ["en"]
    RESOLVER_PREFER_DATES_FROM: str = "future"

    CALENDAR_COMMAND_PREFIX: str = "!calendar"
    REDRAW_ENABLED: bool = True


settings = Settings()
