from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class WorkerSettings(BaseSettings):
    """Configuration for the background job thread pool."""
    WORKER_THREADS: int = 4
    SLEEP_PER_DIGIT_SEC: float = 0.01

    model_config = ConfigDict(env_file=".env", extra="ignore")

def get_worker_settings() -> WorkerSettings:
    """Return a fresh worker settings instance."""
    return WorkerSettings()
