from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Database
    database_url: str = "sqlite+aiosqlite:///signal_league.db"

    # Logging
    log_level: str = "INFO"

    # Web (cron trigger only)
    web_host: str = "0.0.0.0"
    web_port: int = 8888
    cron_secret: str = ""  # Bearer token expected by /api/cron/*

    # Recalculation
    recalc_concurrency: int = 8  # groups processed at once
    tier_history_keep: int = 0  # 0 = keep every tier_history row

    # Mention ingestion
    mention_engagement_threshold: int = 100  # queue a bot action above this
    mention_follower_threshold: int = 5_000
    blocked_accounts: str = ""  # comma-separated handles, "@" optional


settings = Settings()
