"""
Configuration settings for the liquidity mining API

Loads environment variables and provides application configuration.
"""
import logging
import os
from typing import List
from dotenv import load_dotenv

from liquidity_mining.constants import DEFAULT_REWARD_RATE_PER_SECOND
from liquidity_mining.deployment import DEFAULT_REWARD_FUNDING, LEDGER_ADDRESS

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Application settings"""

    # API Configuration
    API_VERSION: str = os.getenv("API_VERSION", "0.1.0")
    API_TITLE: str = os.getenv("API_TITLE", "Uniswap V3 Liquidity Mining API")
    API_DESCRIPTION: str = "Stake concentrated-liquidity positions and claim time-weighted rewards"

    # Ledger Configuration
    REWARD_RATE_PER_SECOND: int = int(os.getenv("REWARD_RATE_PER_SECOND", DEFAULT_REWARD_RATE_PER_SECOND))
    REWARD_FUNDING: int = int(os.getenv("REWARD_FUNDING", DEFAULT_REWARD_FUNDING))
    LEDGER_ADDRESS: str = os.getenv("LEDGER_ADDRESS", LEDGER_ADDRESS)

    # CORS Configuration
    CORS_ORIGINS: List[str] = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

    # Server Configuration
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8000))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    def log_level(self) -> int:
        """LOG_LEVEL 을 logging 레벨 값으로 변환 (알 수 없으면 INFO)"""
        return getattr(logging, self.LOG_LEVEL, logging.INFO)


# Create global settings instance
settings = Settings()


# Validate critical settings on import
if settings.REWARD_RATE_PER_SECOND <= 0:
    logging.getLogger(__name__).warning(
        "REWARD_RATE_PER_SECOND=%s: no rewards will be emitted", settings.REWARD_RATE_PER_SECOND
    )
