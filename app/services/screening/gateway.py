"""Single request/response cycle of the proposal screening endpoint."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from app.lib.logger import configure_logger
from app.services.screening.evaluator import EvaluationRequester
from app.services.screening.exceptions import (
    EvaluationError,
    RateLimitError,
    ValidationError,
    screening_error_response,
)
from app.services.screening.identity import (
    IdentityResolver,
    derive_client_identity,
    merge_headers,
)
from app.services.screening.rate_limiter import ScreeningRateLimiter
from app.services.screening.sanitizer import (
    DEFAULT_MAX_CONTENT_LENGTH,
    DEFAULT_MAX_TITLE_LENGTH,
    sanitize_proposal_input,
)

logger = configure_logger(__name__)


@dataclass
class GatewayRequest:
    method: str
    headers: Mapping[str, str]
    client_host: Optional[str]
    body: bytes = b""


@dataclass
class GatewayResponse:
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


class ScreeningGateway:
    """Orchestrates identity, rate limiting, sanitizing and evaluation.

    Every path ends in a JSON body and a status code; no exception escapes
    ``handle``.
    """

    def __init__(
        self,
        identity_resolver: IdentityResolver,
        rate_limiter: ScreeningRateLimiter,
        requester: EvaluationRequester,
        max_title_length: int = DEFAULT_MAX_TITLE_LENGTH,
        max_content_length: int = DEFAULT_MAX_CONTENT_LENGTH,
    ):
        self.identity_resolver = identity_resolver
        self.rate_limiter = rate_limiter
        self.requester = requester
        self.max_title_length = max_title_length
        self.max_content_length = max_content_length

    async def handle(self, request: GatewayRequest) -> GatewayResponse:
        if request.method.upper() != "POST":
            return GatewayResponse(
                status_code=405,
                body={"error": "Method not allowed"},
                headers={"Allow": "POST"},
            )

        headers = merge_headers(request.headers.items())
        identity = await self.identity_resolver.resolve(headers.get("authorization"))

        response_headers: Dict[str, str] = {}
        if not identity.authenticated:
            client_id = derive_client_identity(headers, request.client_host)
            response_headers["X-RateLimit-Limit"] = str(self.rate_limiter.max_requests)
            try:
                quota = self.rate_limiter.enforce(client_id)
            except RateLimitError as e:
                logger.info(
                    "Anonymous screening quota exhausted",
                    extra={"event_type": "rate_limited", "client_id": client_id},
                )
                response_headers["X-RateLimit-Remaining"] = "0"
                response_headers["Retry-After"] = str(e.retry_after)
                return self._error(e, response_headers)
            response_headers["X-RateLimit-Remaining"] = str(quota.remaining)

        try:
            payload = self._parse_body(request.body)
            proposal = sanitize_proposal_input(
                payload.get("title"),
                payload.get("content"),
                max_title_length=self.max_title_length,
                max_content_length=self.max_content_length,
            )
        except ValidationError as e:
            logger.debug(f"Rejected screening input: {e}")
            return self._error(e, response_headers)

        try:
            evaluation = await self.requester.evaluate(proposal.title, proposal.content)
        except EvaluationError as e:
            logger.error(
                f"Evaluation failed: {e}",
                extra={"event_type": "evaluation_failed", "error_type": type(e).__name__},
            )
            return self._error(e, response_headers)
        except Exception as e:
            logger.error(f"Unexpected error during evaluation: {e}", exc_info=True)
            return self._error(e, response_headers)

        log_prefix = identity.account_id if identity.authenticated else "Anonymous"
        logger.info(
            f"{log_prefix} - Pass: {evaluation.overall_pass}, "
            f"Quality: {evaluation.quality_score * 100:.0f}%, "
            f"Attention: {evaluation.attention_score * 100:.0f}%",
            extra={"event_type": "proposal_screened"},
        )

        body: Dict[str, Any] = {"evaluation": evaluation.to_response()}
        if identity.authenticated:
            body["authenticatedAs"] = identity.account_id
        return GatewayResponse(status_code=200, body=body, headers=response_headers)

    @staticmethod
    def _parse_body(raw_body: bytes) -> Dict[str, Any]:
        try:
            payload = json.loads(raw_body) if raw_body else None
        except (ValueError, UnicodeDecodeError) as e:
            raise ValidationError("body", "Request body must be valid JSON") from e
        if not isinstance(payload, dict):
            raise ValidationError("body", "Request body must be a JSON object")
        return payload

    @staticmethod
    def _error(error: Exception, headers: Dict[str, str]) -> GatewayResponse:
        status_code, body = screening_error_response(error)
        return GatewayResponse(status_code=status_code, body=body, headers=headers)
