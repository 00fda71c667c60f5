"""Link sync configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class SyncSettings(BaseSettings):
    model_config = {"env_prefix": "SPACES_"}

    debounce_ms: int = Field(default=300, ge=0)
    max_token_length: int = Field(default=16000, ge=256)
    base_url: str = Field(default="http://localhost:5173/", min_length=1)
    log_dir: str | None = Field(default=None, min_length=1)

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000
