"""
Configuration settings using Pydantic Settings.

Only the outer shell (CLI, end-of-game watcher) reads settings. The summary
pipeline itself receives thresholds and the viewer name as explicit arguments.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    PydanticBaseSettingsSource,
)


class AFKThresholds(BaseModel):
    """Heuristic AFK cut-offs. A player is AFK only if below every maximum."""

    model_config = ConfigDict(frozen=True)

    min_game_minutes: float = Field(10.0, ge=0)
    max_cs_per_min: float = Field(0.5, ge=0)
    max_damage_to_champions: int = Field(1500, ge=0)
    max_gold_earned: int = Field(4000, ge=0)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Ensure .env values take precedence over system environment variables.
    # Order: init kwargs > .env (dotenv) > env vars > file secrets
    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ):
        return (
            init_settings,
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    # Viewer identity (resolves which side is "mine")
    viewer_summoner_name: str = Field(
        "", validation_alias=AliasChoices("MY_SUMMONER_NAME", "viewer_summoner_name")
    )

    # AFK heuristic thresholds
    afk_min_game_minutes: float = Field(10.0, alias="AFK_MIN_GAME_MINUTES")
    afk_max_cs_per_min: float = Field(0.5, alias="AFK_MAX_CS_PER_MIN")
    afk_max_damage_to_champions: int = Field(
        1500,
        validation_alias=AliasChoices("AFK_MAX_DAMAGE_TO_CHAMP", "afk_max_damage_to_champions"),
    )
    afk_max_gold_earned: int = Field(4000, alias="AFK_MAX_GOLD_EARNED")

    # End-of-game watcher
    poll_interval_seconds: float = Field(3.0, alias="POLL_INTERVAL_SECONDS")
    end_of_game_cooldown_seconds: float = Field(30.0, alias="END_OF_GAME_COOLDOWN_SECONDS")

    # Application Configuration
    app_env: str = Field("development", alias="APP_ENV")
    app_debug: bool = Field(False, alias="APP_DEBUG")
    app_log_level: str = Field("INFO", alias="APP_LOG_LEVEL")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def afk_thresholds(self) -> AFKThresholds:
        return AFKThresholds(
            min_game_minutes=self.afk_min_game_minutes,
            max_cs_per_min=self.afk_max_cs_per_min,
            max_damage_to_champions=self.afk_max_damage_to_champions,
            max_gold_earned=self.afk_max_gold_earned,
        )


# Global settings instance - loaded from environment / .env
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance.

    This function provides dependency injection support for settings.
    """
    return settings
