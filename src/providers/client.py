"""Provider client: one inference request to one hosted endpoint.

Every call returns a ProviderAttempt. Transport failures, timeouts, error
statuses and empty replies become typed failures instead of exceptions, so the
pipeline stages only ever branch on `attempt.succeeded`. There are no retries
here; the vision orchestrator moves on to the next provider instead.

Endpoint shapes:
- gemini_vision: google-genai async client, image part + instruction
- hf_image_to_text: Hugging Face inference, raw image bytes POSTed,
  `[{"generated_text": ...}]` returned
- chat_completion: OpenAI-compatible /chat/completions (DeepSeek by default)
"""

import asyncio
import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

import aiohttp
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from src.models.models import ImageBlob, ProviderAttempt, ProviderErrorKind
from src.utils.config import is_placeholder_key
from src.utils.logger import logger


class ProviderKind(str, Enum):
    GEMINI_VISION = "gemini_vision"
    HF_IMAGE_TO_TEXT = "hf_image_to_text"
    CHAT_COMPLETION = "chat_completion"


@dataclass(frozen=True)
class ProviderSpec:
    """Immutable description of one endpoint."""

    provider_id: str
    kind: ProviderKind
    model_id: str
    api_key: str = field(default="", repr=False)
    base_url: str = ""


@dataclass(frozen=True)
class VisionPayload:
    image: ImageBlob
    instruction: str


@dataclass(frozen=True)
class ChatPayload:
    system: str
    user: str
    temperature: float
    max_tokens: int


Payload = Union[VisionPayload, ChatPayload]


class ProviderError(Exception):
    """A single provider call produced no usable text."""

    def __init__(self, kind: ProviderErrorKind, message: str = "", status_code: Optional[int] = None):
        super().__init__(message or kind.value)
        self.kind = kind
        self.status_code = status_code


def _truncate(text: str, limit: int = 200) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[:limit] + "..."


def extract_hf_text(body: str) -> str:
    """Read generated text from a Hugging Face image-to-text response body.

    Accepts `[{"generated_text": ...}]`, a bare object with the same key, or a
    plain-text body.
    """
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return body.strip()

    if isinstance(parsed, list):
        parts = [item.get("generated_text", "") for item in parsed if isinstance(item, dict)]
        return "\n".join(part for part in parts if isinstance(part, str)).strip()
    if isinstance(parsed, dict):
        if "error" in parsed:
            raise ProviderError(ProviderErrorKind.NON_SUCCESS_STATUS, f"Inference error: {parsed['error']}")
        text = parsed.get("generated_text", "")
        return text.strip() if isinstance(text, str) else ""
    return ""


def extract_chat_text(body: str) -> str:
    """Read `choices[0].message.content` from a chat-completion response body."""
    try:
        parsed = json.loads(body)
        content = parsed["choices"][0]["message"]["content"]
    except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
        raise ProviderError(ProviderErrorKind.EMPTY_BODY, f"Unreadable chat response: {type(e).__name__}")
    return content.strip() if isinstance(content, str) else ""


class ProviderClient:
    """Sends one request per `invoke()` call and classifies the outcome."""

    async def invoke(self, spec: ProviderSpec, payload: Payload, timeout: float) -> ProviderAttempt:
        """Call one provider, bounded by `timeout` seconds.

        Args:
            spec: Endpoint description.
            payload: VisionPayload for vision kinds, ChatPayload for chat.
            timeout: Upper bound for the whole call in seconds.

        Returns:
            ProviderAttempt with text on success or an error kind on failure.
            Cancellation is propagated, never converted into a failure.
        """
        attempt = ProviderAttempt(provider_id=spec.provider_id, model_id=spec.model_id)

        if is_placeholder_key(spec.api_key):
            attempt.error_kind = ProviderErrorKind.UNREACHABLE
            attempt.detail = "API key not configured"
            logger.debug(attempt.describe(), extra={"provider": spec.provider_id})
            return attempt

        try:
            text = await asyncio.wait_for(self._dispatch(spec, payload, timeout), timeout=timeout)
            if not text or not text.strip():
                raise ProviderError(ProviderErrorKind.EMPTY_BODY, "Provider returned no text")
            attempt.text = text.strip()
        except ProviderError as e:
            attempt.error_kind = e.kind
            attempt.status_code = e.status_code
            attempt.detail = str(e)
        except asyncio.TimeoutError:
            attempt.error_kind = ProviderErrorKind.TIMEOUT
            attempt.detail = f"No response within {timeout:g}s"
        except genai_errors.APIError as e:
            attempt.error_kind = ProviderErrorKind.NON_SUCCESS_STATUS
            attempt.status_code = e.code
            attempt.detail = _truncate(str(e))
        except aiohttp.ClientError as e:
            attempt.error_kind = ProviderErrorKind.UNREACHABLE
            attempt.detail = f"{type(e).__name__}: {e}"
        except Exception as e:
            # SDK-side failures (bad arguments, unexpected payloads) count as an unreachable provider
            attempt.error_kind = ProviderErrorKind.UNREACHABLE
            attempt.detail = f"{type(e).__name__}: {e}"

        if attempt.succeeded:
            logger.info(attempt.describe(), extra={"provider": spec.provider_id})
        else:
            logger.warning(f"{attempt.describe()}: {attempt.detail}", extra={"provider": spec.provider_id})
        return attempt

    async def _dispatch(self, spec: ProviderSpec, payload: Payload, timeout: float) -> str:
        if spec.kind == ProviderKind.GEMINI_VISION:
            return await self._call_gemini(spec, payload)
        if spec.kind == ProviderKind.HF_IMAGE_TO_TEXT:
            return await self._call_huggingface(spec, payload, timeout)
        if spec.kind == ProviderKind.CHAT_COMPLETION:
            return await self._call_chat(spec, payload, timeout)
        raise ValueError(f"Unsupported provider kind: {spec.kind}")

    async def _call_gemini(self, spec: ProviderSpec, payload: VisionPayload) -> str:
        client = genai.Client(api_key=spec.api_key)
        response = await client.aio.models.generate_content(
            model=spec.model_id,
            contents=[
                payload.instruction,
                types.Part.from_bytes(data=payload.image.data, mime_type=payload.image.mime_type),
            ],
        )
        return response.text or ""

    async def _call_huggingface(self, spec: ProviderSpec, payload: VisionPayload, timeout: float) -> str:
        url = f"{spec.base_url}/{spec.model_id}"
        headers = {
            "Authorization": f"Bearer {spec.api_key}",
            "Content-Type": payload.image.mime_type,
        }
        status, body = await self._post(url, headers, timeout, data=payload.image.data)
        self._raise_for_status(status, body)
        return extract_hf_text(body)

    async def _call_chat(self, spec: ProviderSpec, payload: ChatPayload, timeout: float) -> str:
        url = f"{spec.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {spec.api_key}",
            "Content-Type": "application/json",
        }
        request_body = {
            "model": spec.model_id,
            "messages": [
                {"role": "system", "content": payload.system},
                {"role": "user", "content": payload.user},
            ],
            "temperature": payload.temperature,
            "max_tokens": payload.max_tokens,
        }
        status, body = await self._post(url, headers, timeout, json_body=request_body)
        self._raise_for_status(status, body)
        return extract_chat_text(body)

    @staticmethod
    def _raise_for_status(status: int, body: str) -> None:
        if status >= 400:
            raise ProviderError(
                ProviderErrorKind.NON_SUCCESS_STATUS,
                f"HTTP {status}: {_truncate(body)}",
                status_code=status,
            )
        if not body or not body.strip():
            raise ProviderError(ProviderErrorKind.EMPTY_BODY, f"HTTP {status} with empty body")

    async def _post(
        self,
        url: str,
        headers: dict[str, str],
        timeout: float,
        data: Optional[bytes] = None,
        json_body: Optional[dict] = None,
    ) -> tuple[int, str]:
        """POST and return (status, body text)."""
        async with aiohttp.ClientSession() as session:
            async with session.post(
                url,
                headers=headers,
                data=data,
                json=json_body,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                return response.status, await response.text()
