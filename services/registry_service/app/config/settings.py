from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./registry.db"
    PORT: int = 8003
    LOG_LEVEL: str = "INFO"

    # Printed as the first title line of every PDF listing.
    ORGANIZATION_NAME: str = "Retirees' Association"
    REPORT_MARGIN: float = 40.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


settings = Settings()
