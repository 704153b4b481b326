from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DYNAFORM_", env_file=".env", extra="ignore")

    API_BASE_URL: str = "http://localhost:3000/api"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Local draft persistence
    DRAFT_PATH: str = "~/.dynaform/drafts.json"
    DRAFT_DEBOUNCE_SECONDS: float = 0.5

    # Transient notifications
    MESSAGE_TIMEOUT_SECONDS: float = 3.0


client_settings = ClientSettings()
