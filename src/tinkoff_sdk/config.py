from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from tinkoff_sdk.types import API_V2_BASE_URL


class Settings(BaseSettings):
    terminal_key: str = ""
    password: SecretStr = SecretStr("")
    base_url: str = API_V2_BASE_URL
    timeout_seconds: float = 10.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TINKOFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
