"""Submit / poll / decode workflow between the editor and Judge0.

One compile request walks ``RECEIVED -> SUBMITTED -> POLLING`` and ends in
``COMPLETED``, ``TIMED_OUT`` or ``FAILED``.  Nothing is shared between
requests; the token and the attempt counter live in the coroutine.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError as SchemaError

from .errors import DecodeError, PollTimeoutError, SubmissionError, UpstreamError, ValidationError
from .judge0 import Judge0Client
from .models import (
    PENDING_STATUS_IDS,
    ExecutionRequest,
    ExecutionResult,
    Language,
    SubmissionHandle,
    SubmissionStatus,
)

logger = logging.getLogger("onlinecompiler")


def encode_base64(text: Optional[str]) -> str:
    return base64.b64encode((text or "").encode("utf-8")).decode("ascii")


def decode_base64(value: Optional[str]) -> Optional[str]:
    """Decode a base64 field from Judge0; empty or missing fields give None."""
    if not value:
        return None
    try:
        # Judge0 wraps long base64 payloads with newlines
        raw = base64.b64decode(value)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError() from exc
    return raw.decode("utf-8", errors="replace")


def decode(raw: dict) -> ExecutionResult:
    """Turn a terminal Judge0 submission payload into an ExecutionResult."""
    if not isinstance(raw, dict):
        raise DecodeError()
    try:
        status = SubmissionStatus.model_validate(raw.get("status"))
    except SchemaError as exc:
        raise DecodeError() from exc
    return ExecutionResult(
        stdout=decode_base64(raw.get("stdout")),
        stderr=decode_base64(raw.get("stderr")),
        compile_output=decode_base64(raw.get("compile_output")),
        status=status,
    )


def build_request(code: Optional[str], language_id: Optional[int], stdin: Optional[str] = None) -> ExecutionRequest:
    if not code or not language_id:
        raise ValidationError()
    return ExecutionRequest(source_text=code, language_id=language_id, stdin=stdin)


def _status_id(raw) -> Optional[int]:
    if isinstance(raw, dict) and isinstance(raw.get("status"), dict):
        return raw["status"].get("id")
    return None


class ExecutionBridge:
    def __init__(self, client: Judge0Client, max_attempts: int = 10, interval_seconds: float = 1.0):
        self.client = client
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds

    async def submit(self, request: ExecutionRequest) -> SubmissionHandle:
        if not request.source_text or not request.language_id:
            raise ValidationError()

        try:
            data = await self.client.create_submission(
                encode_base64(request.source_text),
                request.language_id,
                encode_base64(request.stdin),
            )
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Judge0 submission failed: %s", exc)
            raise SubmissionError() from exc

        token = data.get("token") if isinstance(data, dict) else None
        if not token:
            logger.warning("Judge0 returned no token: %r", data)
            raise SubmissionError()

        logger.info("SUBMITTED language_id=%s token=%s", request.language_id, token)
        return SubmissionHandle(token=token)

    async def await_completion(self, handle: SubmissionHandle) -> ExecutionResult:
        for attempt in range(1, self.max_attempts + 1):
            try:
                raw = await self.client.get_submission_result(handle.token)
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning("POLLING token=%s attempt=%s failed: %s", handle.token, attempt, exc)
                raise SubmissionError("Failed to get submission result") from exc

            status_id = _status_id(raw)
            logger.debug("POLLING token=%s attempt=%s status=%s", handle.token, attempt, status_id)
            if status_id not in PENDING_STATUS_IDS:
                result = decode(raw)
                logger.info("COMPLETED token=%s status=%s (%s) after %s poll(s)",
                            handle.token, result.status.id, result.status.description, attempt)
                return result

            if attempt < self.max_attempts:
                await asyncio.sleep(self.interval_seconds)

        logger.warning("TIMED_OUT token=%s after %s polls", handle.token, self.max_attempts)
        raise PollTimeoutError()

    async def compile(self, request: ExecutionRequest) -> ExecutionResult:
        logger.info("RECEIVED language_id=%s source_bytes=%s", request.language_id, len(request.source_text or ""))
        handle = await self.submit(request)
        return await self.await_completion(handle)

    async def languages(self) -> List[Language]:
        try:
            data = await self.client.get_languages()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Judge0 languages request failed: %s", exc)
            raise UpstreamError("Failed to fetch languages") from exc
        try:
            return [Language.model_validate(item) for item in data]
        except (SchemaError, TypeError) as exc:
            raise UpstreamError("Failed to fetch languages") from exc
