"""Chat-completions client for the external language model.

The gateway is the only component that performs I/O and the only origin of
typed errors. It never retries; retry policy belongs to the caller.
"""

import json
import time
from typing import Optional, Sequence
import httpx
from pydantic import ValidationError
from habitus.models.chat import ChatRequest, ChatResponse, ChatTurn
from habitus.services.credentials import CredentialProvider, EnvironmentCredentialProvider
from habitus.utils.config import MAX_TOKENS, TEMPERATURE, GatewayConfig
from habitus.utils.errors import (
    GATEWAY_ERRORS,
    InvalidCredential,
    InvalidResponse,
    NetworkFailure,
    RateLimited,
)
from habitus.utils.logging import (
    get_structured_logger,
    mask_sensitive_data,
    sanitize_message_text,
)

logger = get_structured_logger(__name__)

_SSE_DATA_PREFIX = "data:"
_SSE_DONE = "[DONE]"


def _parse_retry_after(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def raise_for_status(response: httpx.Response) -> None:
    """Map a non-200 response to the matching gateway error."""
    status = response.status_code
    if status == 200:
        return
    if status in (401, 403):
        raise InvalidCredential(status_code=status)
    if status == 429:
        raise RateLimited(retry_after=_parse_retry_after(response.headers.get("retry-after")))
    raise InvalidResponse(f"Model endpoint returned HTTP {status}", status_code=status)


def decode_completion(body: bytes) -> str:
    """Return the first choice's content from a chat-completions body."""
    try:
        return ChatResponse.model_validate_json(body).first_content
    except ValidationError as e:
        raise InvalidResponse(f"Undecodable model response: {e.error_count()} error(s)", status_code=200) from e


def decode_stream_chunk(data: str) -> str:
    """Return the delta content carried by one server-sent event payload."""
    try:
        chunk = json.loads(data)
    except json.JSONDecodeError as e:
        raise InvalidResponse("Undecodable stream chunk", status_code=200) from e

    choices = chunk.get("choices") if isinstance(chunk, dict) else None
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    delta = choices[0].get("delta")
    if not isinstance(delta, dict):
        return ""
    content = delta.get("content")
    return content if isinstance(content, str) else ""


class ModelGateway:
    """Sends chat turns to the model endpoint and returns the completion text."""

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        credential_provider: Optional[CredentialProvider] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or GatewayConfig()
        self.credential_provider = credential_provider or EnvironmentCredentialProvider()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.config.timeout_seconds)
        logger.info(
            "ModelGateway initialized",
            llm_model=self.config.model,
            endpoint=self.config.completions_url,
            timeout_seconds=self.config.timeout_seconds
        )

    async def __aenter__(self) -> "ModelGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        """Close the HTTP client if the gateway created it."""
        if self._owns_client:
            await self._client.aclose()

    def _build_request(self, turns: Sequence[ChatTurn], stream: bool) -> httpx.Request:
        body = ChatRequest(
            model=self.config.model,
            messages=list(turns),
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
            stream=stream,
        )
        return self._client.build_request(
            "POST",
            self.config.completions_url,
            headers={
                "Authorization": f"Bearer {self.credential_provider.get_api_key()}",
                "Content-Type": "application/json",
            },
            content=body.model_dump_json(),
            timeout=self.config.timeout_seconds,
        )

    async def complete(self, turns: Sequence[ChatTurn], stream: bool = False) -> str:
        """
        Send the turns and return the first completion's text.

        An empty choices list yields "". Raises NetworkFailure, InvalidResponse,
        InvalidCredential or RateLimited; nothing is retried.
        """
        if not turns:
            raise ValueError("turns must contain at least one ChatTurn")

        request = self._build_request(turns, stream)
        logger.info(
            "LLM request started",
            llm_model=self.config.model,
            turn_count=len(turns),
            stream=stream,
            prompt_preview=sanitize_message_text(turns[-1].content)
        )

        start_time = time.perf_counter()
        try:
            if stream:
                content = await self._send_streaming(request)
            else:
                content = await self._send(request)
        except GATEWAY_ERRORS as e:
            # A rejected key needs operator action; the rest are transient or model-side
            log = logger.error if isinstance(e, InvalidCredential) else logger.warning
            log(
                "LLM request failed",
                llm_model=self.config.model,
                error_type=type(e).__name__,
                status_code=getattr(e, "status_code", None),
                error=mask_sensitive_data(str(e))
            )
            raise

        logger.info(
            "LLM response received",
            llm_model=self.config.model,
            llm_latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
            response_length=len(content),
            response_preview=sanitize_message_text(content)
        )
        return content

    async def _send(self, request: httpx.Request) -> str:
        try:
            response = await self._client.send(request)
        except httpx.TransportError as e:
            raise NetworkFailure(e) from e
        except httpx.DecodingError as e:
            raise InvalidResponse("Undecodable model response body", status_code=200) from e

        raise_for_status(response)
        return decode_completion(response.content)

    async def _send_streaming(self, request: httpx.Request) -> str:
        parts: list[str] = []
        try:
            response = await self._client.send(request, stream=True)
            try:
                raise_for_status(response)
                async for line in response.aiter_lines():
                    line = line.strip()
                    if not line.startswith(_SSE_DATA_PREFIX):
                        continue
                    data = line[len(_SSE_DATA_PREFIX):].strip()
                    if data == _SSE_DONE:
                        break
                    parts.append(decode_stream_chunk(data))
            finally:
                await response.aclose()
        except httpx.TransportError as e:
            raise NetworkFailure(e) from e
        except httpx.DecodingError as e:
            raise InvalidResponse("Undecodable model response body", status_code=200) from e

        return "".join(parts)
