"""Shared fixtures: a scripted Judge0 behind ``httpx.MockTransport``."""

from __future__ import annotations

import base64
import json

import httpx
import pytest

from onlinecompiler.config import Config
from onlinecompiler.judge0 import Judge0Client

JUDGE0_URL = "http://judge0.test"

DESCRIPTIONS = {
    1: "In Queue",
    2: "Processing",
    3: "Accepted",
    5: "Time Limit Exceeded",
    6: "Compilation Error",
    11: "Runtime Error (NZEC)",
}


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class FakeJudge0:
    """Answers submissions with a token and polls with a scripted status sequence.

    Once the sequence is used up the last status keeps being returned.
    """

    def __init__(self, statuses=(3,), token="tok-1", submit_body=None, result=None, languages=None):
        self.statuses = list(statuses)
        self.token = token
        self.submit_body = submit_body
        self.result = result if result is not None else {"stdout": b64("hello\n")}
        self.languages = languages if languages is not None else [{"id": 71, "name": "Python (3.8.1)"}]
        self.submissions = []
        self.polled_tokens = []
        self.requests = []

    @property
    def polls(self) -> int:
        return len(self.polled_tokens)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST" and path == "/submissions":
            self.submissions.append(json.loads(request.content))
            body = self.submit_body if self.submit_body is not None else {"token": self.token}
            return httpx.Response(201, json=body)
        if request.method == "GET" and path.startswith("/submissions/"):
            self.polled_tokens.append(path.rsplit("/", 1)[-1])
            status_id = self.statuses[min(self.polls, len(self.statuses)) - 1]
            body = {"status": {"id": status_id, "description": DESCRIPTIONS.get(status_id, "Unknown")}}
            if status_id not in (1, 2):
                body.update(self.result)
            return httpx.Response(200, json=body)
        if request.method == "GET" and path == "/languages":
            return httpx.Response(200, json=self.languages)
        return httpx.Response(404, json={"error": "not found"})

    def client(self) -> Judge0Client:
        return Judge0Client(JUDGE0_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def config() -> Config:
    return Config(judge0_url=JUDGE0_URL, poll_interval_ms=0, allowed_origin="https://editor.example.com")


@pytest.fixture
def judge0() -> FakeJudge0:
    return FakeJudge0()
