"""Editor-side client for the compile bridge.

``EditorSession`` keeps what the user is editing (source, language, stdin,
theme and font) and talks to ``POST /compile``.  It moves through three
phases: idle, waiting for the bridge, and showing a result.  Whatever the
bridge answers, result or error message, is kept and rendered as is.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from .models import CompileResponse

# Judge0 CE language ids for the languages offered in the editor
LANGUAGE_IDS = {
    "c": 50,
    "cpp": 54,
    "csharp": 51,
    "go": 60,
    "java": 62,
    "javascript": 63,
    "kotlin": 78,
    "php": 68,
    "python": 71,
    "ruby": 72,
    "rust": 73,
    "typescript": 74,
}

EXTENSIONS = {
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".go": "go",
    ".java": "java",
    ".js": "javascript",
    ".kt": "kotlin",
    ".php": "php",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".ts": "typescript",
}


class Phase(str, Enum):
    IDLE = "idle"
    WAITING = "waiting"
    SHOWING_RESULT = "showing_result"


def normalize_theme(theme: str) -> str:
    # themes are stored as css class names, e.g. "theme-vs-dark"
    return theme[len("theme-"):] if theme.startswith("theme-") else theme


@dataclass
class EditorState:
    source: str = ""
    language: str = "python"
    language_id: Optional[int] = LANGUAGE_IDS["python"]
    stdin: str = ""
    theme: str = "vs-dark"
    font_size: int = 14
    font_family: str = "monospace"


class EditorSession:
    def __init__(self, bridge_url: str, state: Optional[EditorState] = None, view=None,
                 timeout: float = 30, transport: Optional[httpx.BaseTransport] = None):
        self.bridge_url = bridge_url.rstrip("/")
        self.state = state or EditorState()
        self.timeout = timeout
        self.transport = transport
        self.phase = Phase.IDLE
        self.result: Optional[CompileResponse] = None
        self.error: Optional[str] = None
        self.view = None
        if view is not None:
            self.attach(view)

    def attach(self, view) -> None:
        """Attach a live editor view; it only needs a ``set_theme(name)`` method."""
        self.view = view
        self.view.set_theme(self.state.theme)

    def set_source(self, source: str) -> None:
        self.state.source = source or ""

    def set_stdin(self, stdin: str) -> None:
        self.state.stdin = stdin or ""

    def set_language(self, language: str, language_id: Optional[int] = None) -> None:
        self.state.language = language
        self.state.language_id = language_id if language_id is not None else LANGUAGE_IDS.get(language.lower())

    def set_theme(self, theme: str) -> None:
        # applied to the mounted view in place, the view is never recreated
        self.state.theme = normalize_theme(theme)
        if self.view is not None:
            self.view.set_theme(self.state.theme)

    def set_font(self, size: Optional[int] = None, family: Optional[str] = None) -> None:
        if size is not None:
            self.state.font_size = size
        if family is not None:
            self.state.font_family = family

    def payload(self) -> dict:
        return {
            "code": self.state.source,
            "languageId": self.state.language_id,
            "input": self.state.stdin,
        }

    def submit(self) -> Optional[CompileResponse]:
        self.phase = Phase.WAITING
        self.result = None
        self.error = None
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.post(f"{self.bridge_url}/compile", json=self.payload())
            if r.status_code == 200:
                self.result = CompileResponse.model_validate(r.json())
            else:
                self.error = _error_message(r)
        except httpx.HTTPError as exc:
            self.error = f"Could not reach the compiler: {exc}"
        except ValueError:
            self.error = "Malformed response from the compiler"
        self.phase = Phase.SHOWING_RESULT
        return self.result

    def render(self) -> str:
        if self.phase is Phase.IDLE:
            return ""
        if self.phase is Phase.WAITING:
            return "Running..."
        if self.error is not None:
            return f"Error: {self.error}"

        result = self.result
        lines = [f"Status: {result.status.description} ({result.status.id})"]
        for title, value in (
            ("Output", result.output),
            ("Error", result.error),
            ("Compile output", result.compileOutput),
        ):
            if value is not None:
                lines.append(f"--- {title} ---")
                lines.append(value)
        return "\n".join(lines)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return body["error"]
    return f"HTTP {response.status_code}"


def guess_language(filename: str) -> Optional[str]:
    return EXTENSIONS.get(os.path.splitext(filename)[1].lower())
