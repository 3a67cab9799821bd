import httpx
from typing import Optional

from .config import Config

RESULT_FIELDS = "stdout,stderr,compile_output,status"


class Judge0Client:
    """Thin async wrapper over the two Judge0 submission calls.

    Payloads go out and come back base64 encoded; encoding and decoding is
    left to the caller.  ``transport`` lets tests swap the network for an
    ``httpx.MockTransport``.
    """

    def __init__(self, base_url: str, headers: Optional[dict] = None, timeout: float = 10,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.headers = headers or {"Content-Type": "application/json"}
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(cls, config: Config, transport: Optional[httpx.AsyncBaseTransport] = None) -> "Judge0Client":
        return cls(
            config.judge0_url,
            headers=config.judge0_headers(),
            timeout=config.judge0_timeout_seconds,
            transport=transport,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self.headers, timeout=self.timeout, transport=self.transport)

    async def create_submission(self, source_b64: str, language_id: int, stdin_b64: str = "") -> dict:
        url = f"{self.base_url}/submissions?base64_encoded=true&wait=false"
        payload = {
            "source_code": source_b64,
            "language_id": language_id,
            "stdin": stdin_b64,
        }
        async with self._client() as client:
            r = await client.post(url, json=payload)
            r.raise_for_status()
            return r.json()

    async def get_submission_result(self, token: str) -> dict:
        url = f"{self.base_url}/submissions/{token}?base64_encoded=true&fields={RESULT_FIELDS}"
        async with self._client() as client:
            r = await client.get(url)
            r.raise_for_status()
            return r.json()

    async def get_languages(self) -> list:
        async with self._client() as client:
            r = await client.get(f"{self.base_url}/languages")
            r.raise_for_status()
            return r.json()
