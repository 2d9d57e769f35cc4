"""Proposal screening.

Key modules:
- sanitizer: input validation and whitespace normalisation
- identity: optional caller authentication and the anonymous rate-limit key
- rate_limiter: in-memory fixed-window limiter for anonymous callers
- evaluator: prompt building, the evaluation service call and response validation
- gateway: orchestration of one screening request into an HTTP-shaped response
"""

from .evaluator import EvaluationRequester, build_screening_messages, parse_evaluation
from .exceptions import (
    AuthError,
    EvaluationError,
    EvaluationTimeoutError,
    MalformedResponseError,
    RateLimitError,
    ScreeningError,
    UpstreamStatusError,
    ValidationError,
)
from .gateway import GatewayRequest, GatewayResponse, ScreeningGateway
from .identity import (
    IdentityResolver,
    IdentityResult,
    derive_client_identity,
    merge_headers,
)
from .models import Evaluation
from .rate_limiter import RateLimitResult, ScreeningRateLimiter
from .sanitizer import SanitizedProposal, sanitize_proposal_input

__all__ = [
    "AuthError",
    "Evaluation",
    "EvaluationError",
    "EvaluationRequester",
    "EvaluationTimeoutError",
    "GatewayRequest",
    "GatewayResponse",
    "IdentityResolver",
    "IdentityResult",
    "MalformedResponseError",
    "RateLimitError",
    "RateLimitResult",
    "SanitizedProposal",
    "ScreeningError",
    "ScreeningGateway",
    "ScreeningRateLimiter",
    "UpstreamStatusError",
    "ValidationError",
    "build_screening_messages",
    "derive_client_identity",
    "merge_headers",
    "parse_evaluation",
    "sanitize_proposal_input",
]
