from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_ENV: str = "development"
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Azure AD app registration for this API
    AZURE_TENANT_ID: str = ""
    AZURE_CLIENT_ID: str = ""
    AZURE_CLIENT_SECRET: str = ""
    AUTHORITY_HOST: str = "https://login.microsoftonline.com"

    # Scopes a caller's bearer token must carry (any one of them)
    API_SCOPES: List[str] = ["access_as_user"]

    # Microsoft Graph
    GRAPH_BASE_URL: str = "https://graph.microsoft.com/v1.0"
    GRAPH_SCOPES: List[str] = ["https://graph.microsoft.com/.default"]
    GRAPH_TIMEOUT_SECONDS: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def authority(self) -> str:
        return f"{self.AUTHORITY_HOST.rstrip('/')}/{self.AZURE_TENANT_ID}"


settings = Settings()


def is_configured(value: str) -> bool:
    return bool(value and value.strip())


def validate_required_keys():
    """Validate that the app registration settings are present"""
    required_keys = [
        ("AZURE_TENANT_ID", settings.AZURE_TENANT_ID),
        ("AZURE_CLIENT_ID", settings.AZURE_CLIENT_ID),
        ("AZURE_CLIENT_SECRET", settings.AZURE_CLIENT_SECRET),
    ]

    missing_keys = []
    for key_name, key_value in required_keys:
        if not is_configured(key_value):
            missing_keys.append(key_name)

    if missing_keys:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing_keys)}. "
            f"Please check your .env file."
        )
