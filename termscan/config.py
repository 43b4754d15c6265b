from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore', frozen=True)

    PORT: int = 3000
    OPENAI_API_KEY: str = ''
    ALLOWED_ORIGINS: str = ''
    LOG_LEVEL: str = 'INFO'
    SAMPLE_RATE: float = 1.0

    @property
    def origin_allowlist(self) -> tuple[str, ...]:
        return tuple(s.strip() for s in self.ALLOWED_ORIGINS.split(',') if s.strip())
