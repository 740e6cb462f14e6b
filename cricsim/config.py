"""
Application configuration
"""
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Settings from environment variables"""

    # Persistence
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "cricsim.db")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    # Simulation
    DEFAULT_PITCH: str = os.getenv("DEFAULT_PITCH", "Balanced Sporting Pitch")
    DEFAULT_SEED: Optional[int] = int(os.environ["SIM_SEED"]) if os.getenv("SIM_SEED") else None
    SIM_WORKERS: int = int(os.getenv("SIM_WORKERS", "1"))  # >1 fans batches out over processes

    # HTTP
    CORS_ORIGINS: list[str] = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]


settings = Settings()
