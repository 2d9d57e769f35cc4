"""Proposal screening through an OpenAI-compatible chat completions service."""

import asyncio
import json
import re
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from app.config import EvaluatorConfig
from app.lib.logger import configure_logger
from app.services.screening.exceptions import (
    EvaluationError,
    EvaluationTimeoutError,
    MalformedResponseError,
    UpstreamStatusError,
)
from app.services.screening.models import Evaluation, EvaluatorResponse
from app.services.screening.prompts import (
    SCREENING_SYSTEM_PROMPT,
    SCREENING_USER_PROMPT_TEMPLATE,
)

logger = configure_logger(__name__)

# Upstream bodies are logged, never returned; cap what ends up in the logs
MAX_LOGGED_BODY_CHARS = 500

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)
_DELIMITER_TAG = re.compile(r"<(/?\s*proposal_(?:title|content)\s*)>", re.IGNORECASE)


def _truncate(text: str, limit: int = MAX_LOGGED_BODY_CHARS) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _neutralize_delimiters(text: str) -> str:
    """Stop proposal text from closing or opening the prompt's data tags."""
    return _DELIMITER_TAG.sub(r"&lt;\1&gt;", text)


def build_screening_messages(title: str, content: str) -> List[Dict[str, str]]:
    """Build the chat messages for one screening request.

    The rubric lives in the static system message; the proposal only ever
    appears inside the tagged data block of the user message.
    """
    user_content = SCREENING_USER_PROMPT_TEMPLATE.format(
        title=_neutralize_delimiters(title),
        content=_neutralize_delimiters(content),
    )
    return [
        {"role": "system", "content": SCREENING_SYSTEM_PROMPT},
        {"role": "user", "content": user_content},
    ]


def _strip_code_fence(content: str) -> str:
    content = content.strip()
    match = _CODE_FENCE.match(content)
    return match.group(1) if match else content


def parse_evaluation(response_json: Any) -> Evaluation:
    """Validate a chat completions response and build an Evaluation from it.

    Args:
        response_json: Decoded JSON body returned by the service

    Returns:
        Evaluation with aggregates recomputed from the criteria

    Raises:
        MalformedResponseError: If any part of the response fails validation
    """
    if not isinstance(response_json, dict):
        raise MalformedResponseError("Response body is not a JSON object")

    choices = response_json.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedResponseError("No choices in evaluator response")

    first_choice = choices[0]
    message = first_choice.get("message") if isinstance(first_choice, dict) else None
    if not isinstance(message, dict) or not isinstance(message.get("content"), str):
        raise MalformedResponseError("Invalid message content in evaluator response")

    raw_content = _strip_code_fence(message["content"])
    try:
        evaluation_json = json.loads(raw_content)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            "Evaluator returned invalid JSON",
            {"error": str(e), "content": _truncate(raw_content)},
        ) from e

    if not isinstance(evaluation_json, dict):
        raise MalformedResponseError("Evaluator JSON is not an object")

    try:
        evaluator_response = EvaluatorResponse.model_validate(evaluation_json)
    except SchemaValidationError as e:
        raise MalformedResponseError(
            "Evaluator JSON does not match the evaluation schema",
            {
                "errors": [
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                ]
            },
        ) from e

    return Evaluation.from_response(evaluator_response)


class EvaluationRequester:
    """Sends one screening request per call to the evaluation service.

    There is no retry and no caching; callers own retry policy and identical
    proposals are evaluated independently.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "https://openrouter.ai/api/v1",
        timeout_seconds: float = 60.0,
        temperature: float = 0.0,
        referer: str = "",
        title: str = "Proposal Screening",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.temperature = temperature
        self.referer = referer
        self.title = title
        self._client = client

    @classmethod
    def from_config(
        cls, evaluator_config: EvaluatorConfig, client: Optional[httpx.AsyncClient] = None
    ) -> "EvaluationRequester":
        return cls(
            api_key=evaluator_config.api_key,
            model=evaluator_config.model,
            base_url=evaluator_config.base_url,
            timeout_seconds=evaluator_config.timeout_seconds,
            temperature=evaluator_config.temperature,
            referer=evaluator_config.referer,
            title=evaluator_config.title,
            client=client,
        )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers

    async def _post(self, client: httpx.AsyncClient, payload: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/chat/completions"
        try:
            response = await client.post(url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            raise EvaluationTimeoutError("Evaluator request timed out") from e
        except httpx.HTTPError as e:
            raise EvaluationError(
                "Evaluator request failed", {"error": type(e).__name__}
            ) from e

        if response.is_error:
            body = _truncate(response.text)
            logger.error(
                f"Evaluator returned HTTP {response.status_code}",
                extra={"status_code": response.status_code, "response_body": body},
            )
            raise UpstreamStatusError(
                "Evaluator returned an error status",
                status_code=response.status_code,
                response_body=body,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "Evaluator response body is not JSON",
                {"response_body": _truncate(response.text)},
            ) from e

    async def _call(self, messages: List[Dict[str, str]]) -> Any:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
        }

        logger.debug(f"Making evaluator API call to model: {self.model}")

        if self._client is not None:
            return await self._post(self._client, payload)
        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            return await self._post(client, payload)

    async def evaluate(self, title: str, content: str) -> Evaluation:
        """Screen a sanitized proposal.

        Args:
            title: Sanitized proposal title
            content: Sanitized proposal content

        Returns:
            The validated Evaluation

        Raises:
            EvaluationTimeoutError: If the service does not answer in time
            UpstreamStatusError: If the service answers with a non-2xx status
            MalformedResponseError: If the answer fails schema validation
            EvaluationError: For any other transport failure
        """
        messages = build_screening_messages(title, content)

        try:
            response_json = await asyncio.wait_for(
                self._call(messages), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise EvaluationTimeoutError(
                "Evaluator did not respond in time",
                {"timeout_seconds": self.timeout_seconds},
            ) from e

        return parse_evaluation(response_json)
