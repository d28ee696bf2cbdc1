from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    discord_token: str = Field(default="", description="Discord bot token")
    database_url: str = Field(default="sqlite:///data/bot.db", description="Database connection URL")

    bot_prefix: str = Field(default="!", description="Command prefix")
    environment: str = Field(default="development", description="Environment")
    log_level: str = Field(default="INFO", description="Logging level")

    # Module configuration
    enabled_modules: list[str] = Field(default=["basic"], description="List of enabled modules")
    module_directories: list[str] = Field(default=["modules"], description="Directories to scan for modules")

    # Command usage tracking
    record_command_usage: bool = Field(default=True, description="Store an entry for every dispatched command")

    # Development settings
    debug: bool = Field(default=False, description="Enable debug mode")


# Global settings instance
settings = BotSettings()
