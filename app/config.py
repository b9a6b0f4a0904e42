from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    llm_api_key: str = ""
    llm_base_url: str = "https://openrouter.ai/api/v1"
    llm_model: str = "google/gemini-2.5-flash"
    telegram_bot_token: str = ""
    db_path: str = "savings_coach.json"
    history_limit: int = 10
    expense_context_limit: int = 20


@lru_cache
def get_settings() -> Settings:
    return Settings()
