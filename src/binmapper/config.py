import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load the appropriate .env file on module import
env = os.environ.get("BINMAPPER_ENV", "development").lower()
env_file = f".env.{env}"
if os.path.exists(env_file):
    load_dotenv(env_file)
else:
    # Fall back to the default .env file
    load_dotenv()


@dataclass
class Config:
    environment: str
    store_url: str
    namespace: str
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            environment=env,
            store_url=os.environ.get("BINMAPPER_STORE_URL", "redis://localhost:6379/0"),
            namespace=os.environ.get("BINMAPPER_NAMESPACE", "app"),
            log_level=os.environ.get("BINMAPPER_LOG_LEVEL", "WARNING").upper(),
        )


config = Config.from_env()


def configure_logging(level: Optional[str] = None) -> None:
    """Apply the configured log level to the binmapper logger hierarchy."""
    logging.getLogger("binmapper").setLevel(level or config.log_level)
