from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    port: int = 8001
    data_dir: str = "/data"
    database_url: str | None = None
    log_level: str = "INFO"

    @property
    def db_url(self) -> str:
        if self.database_url:
            return self.database_url
        # sqlite file next to the service data
        return f"sqlite:///{self.data_dir.rstrip('/')}/file_upload_service.db"


settings = Settings()
