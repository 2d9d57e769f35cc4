import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

from app.lib.logger import configure_logger

logger = configure_logger(__name__)

load_dotenv()


@dataclass
class EvaluatorConfig:
    """Configuration for the external evaluation service."""

    api_key: str = os.getenv("SCREENING_EVALUATOR_API_KEY", "")
    model: str = os.getenv("SCREENING_EVALUATOR_MODEL", "openai/gpt-4.1")
    base_url: str = os.getenv(
        "SCREENING_EVALUATOR_BASE_URL", "https://openrouter.ai/api/v1"
    )
    timeout_seconds: float = float(
        os.getenv("SCREENING_EVALUATOR_TIMEOUT_SECONDS", "60")
    )
    temperature: float = float(os.getenv("SCREENING_EVALUATOR_TEMPERATURE", "0.0"))
    # OpenRouter attribution headers
    referer: str = os.getenv("SCREENING_EVALUATOR_REFERER", "")
    title: str = os.getenv("SCREENING_EVALUATOR_TITLE", "Proposal Screening")


@dataclass
class RateLimitConfig:
    """Anonymous-usage limits, applied per client identity."""

    max_requests: int = int(os.getenv("SCREENING_RATE_LIMIT_MAX_REQUESTS", "5"))
    window_seconds: int = int(
        os.getenv("SCREENING_RATE_LIMIT_WINDOW_SECONDS", str(15 * 60))
    )
    sweep_interval_seconds: int = int(
        os.getenv("SCREENING_RATE_LIMIT_SWEEP_INTERVAL_SECONDS", "60")
    )


@dataclass
class SanitizerConfig:
    max_title_length: int = int(os.getenv("SCREENING_MAX_TITLE_LENGTH", "200"))
    max_content_length: int = int(os.getenv("SCREENING_MAX_CONTENT_LENGTH", "50000"))


@dataclass
class IdentityConfig:
    """Configuration for the identity provider used to upgrade callers."""

    backend: str = os.getenv("SCREENING_IDENTITY_BACKEND", "supabase")
    supabase_url: str = os.getenv("SCREENING_SUPABASE_URL", "")
    supabase_key: str = os.getenv("SCREENING_SUPABASE_ANON_KEY", "")


@dataclass
class CORSConfig:
    allow_origins: List[str] = field(
        default_factory=lambda: [
            origin.strip()
            for origin in os.getenv(
                "SCREENING_CORS_ORIGINS", "http://localhost:3000"
            ).split(",")
            if origin.strip()
        ]
    )


@dataclass
class Config:
    evaluator: EvaluatorConfig = field(default_factory=EvaluatorConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    sanitizer: SanitizerConfig = field(default_factory=SanitizerConfig)
    identity: IdentityConfig = field(default_factory=IdentityConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)

    @classmethod
    def load(cls) -> "Config":
        """Load and validate configuration"""
        config = cls()
        if not config.evaluator.api_key:
            logger.warning("SCREENING_EVALUATOR_API_KEY is not set")
        if config.rate_limit.max_requests < 1:
            raise ValueError("SCREENING_RATE_LIMIT_MAX_REQUESTS must be at least 1")
        if config.rate_limit.window_seconds < 1:
            raise ValueError("SCREENING_RATE_LIMIT_WINDOW_SECONDS must be at least 1")
        logger.info("Configuration loaded successfully")
        return config


# Global configuration instance
config = Config.load()
