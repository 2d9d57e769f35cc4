from functools import lru_cache

from app.backend.factory import get_identity_provider
from app.config import config
from app.lib.logger import configure_logger
from app.services.screening import (
    EvaluationRequester,
    IdentityResolver,
    ScreeningGateway,
    ScreeningRateLimiter,
)

logger = configure_logger(__name__)


@lru_cache()
def get_rate_limiter() -> ScreeningRateLimiter:
    """Process-wide rate limiter shared by every request handler."""
    return ScreeningRateLimiter(
        max_requests=config.rate_limit.max_requests,
        window_seconds=config.rate_limit.window_seconds,
        sweep_interval_seconds=config.rate_limit.sweep_interval_seconds,
    )


@lru_cache()
def get_identity_resolver() -> IdentityResolver:
    return IdentityResolver(get_identity_provider())


@lru_cache()
def get_evaluation_requester() -> EvaluationRequester:
    return EvaluationRequester.from_config(config.evaluator)


@lru_cache()
def get_gateway() -> ScreeningGateway:
    """Gateway wired from configuration; override in tests via dependency_overrides."""
    return ScreeningGateway(
        identity_resolver=get_identity_resolver(),
        rate_limiter=get_rate_limiter(),
        requester=get_evaluation_requester(),
        max_title_length=config.sanitizer.max_title_length,
        max_content_length=config.sanitizer.max_content_length,
    )
