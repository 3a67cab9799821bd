"""Tests for the editor session and the ``run`` command."""

from __future__ import annotations

import functools
import json

import httpx

from onlinecompiler import cli
from onlinecompiler.frontend import EditorSession, EditorState, Phase, guess_language, normalize_theme

BRIDGE_URL = "http://bridge.test"

ACCEPTED = {
    "output": "4\n",
    "error": None,
    "compileOutput": None,
    "status": {"id": 3, "description": "Accepted"},
}


class FakeView:
    def __init__(self):
        self.themes = []

    def set_theme(self, theme):
        self.themes.append(theme)


def bridge_transport(status_code=200, body=None, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(json.loads(request.content))
        return httpx.Response(status_code, json=ACCEPTED if body is None else body)

    return httpx.MockTransport(handler)


def test_submit_sends_editor_state():
    seen = []
    session = EditorSession(BRIDGE_URL, transport=bridge_transport(seen=seen))
    session.set_source("print(2 + 2)")
    session.set_language("python")
    session.set_stdin("ignored")

    result = session.submit()

    assert seen == [{"code": "print(2 + 2)", "languageId": 71, "input": "ignored"}]
    assert result.output == "4\n"
    assert session.phase is Phase.SHOWING_RESULT
    assert session.error is None


def test_render_result_verbatim():
    body = dict(ACCEPTED, error="Traceback...\n", status={"id": 11, "description": "Runtime Error (NZEC)"})
    session = EditorSession(BRIDGE_URL, transport=bridge_transport(body=body))
    session.set_source("x")
    session.submit()

    assert session.render() == "\n".join([
        "Status: Runtime Error (NZEC) (11)",
        "--- Output ---",
        "4\n",
        "--- Error ---",
        "Traceback...\n",
    ])


def test_bridge_error_is_shown():
    session = EditorSession(
        BRIDGE_URL,
        transport=bridge_transport(status_code=400, body={"error": "Code and language ID are required"}),
    )
    assert session.submit() is None
    assert session.error == "Code and language ID are required"
    assert session.render() == "Error: Code and language ID are required"


def test_unreachable_bridge():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    session = EditorSession(BRIDGE_URL, transport=httpx.MockTransport(handler))
    session.set_source("x")
    session.submit()
    assert session.phase is Phase.SHOWING_RESULT
    assert session.error.startswith("Could not reach the compiler")


def test_idle_renders_nothing():
    assert EditorSession(BRIDGE_URL).render() == ""


def test_theme_applied_to_live_view():
    view = FakeView()
    session = EditorSession(BRIDGE_URL, state=EditorState(theme="vs-light"), view=view)
    session.set_theme("theme-hc-black")

    assert session.view is view
    assert view.themes == ["vs-light", "hc-black"]
    assert session.state.theme == "hc-black"


def test_language_and_font_helpers():
    session = EditorSession(BRIDGE_URL)
    session.set_language("cpp")
    assert session.state.language_id == 54
    session.set_language("brainfuck", 44)
    assert session.state.language_id == 44
    session.set_font(size=18, family="Fira Code")
    assert (session.state.font_size, session.state.font_family) == (18, "Fira Code")
    assert normalize_theme("vs-dark") == "vs-dark"
    assert guess_language("Main.JAVA") == "java"
    assert guess_language("notes.txt") is None


def test_cli_run_prints_result(tmp_path, monkeypatch, capsys):
    seen = []
    monkeypatch.setattr(cli, "EditorSession", functools.partial(EditorSession, transport=bridge_transport(seen=seen)))
    source = tmp_path / "add.py"
    source.write_text("print(2 + 2)\n")

    code = cli.main(["run", str(source), "--stdin", "5", "--bridge-url", BRIDGE_URL])

    assert code == 0
    assert seen[0]["languageId"] == 71
    assert seen[0]["input"] == "5"
    assert "Status: Accepted (3)" in capsys.readouterr().out


def test_cli_run_reports_bridge_error(tmp_path, monkeypatch, capsys):
    transport = bridge_transport(status_code=500, body={"error": "Submission timed out"})
    monkeypatch.setattr(cli, "EditorSession", functools.partial(EditorSession, transport=transport))
    source = tmp_path / "loop.py"
    source.write_text("while True: pass\n")

    assert cli.main(["run", str(source)]) == 1
    assert "Error: Submission timed out" in capsys.readouterr().out


def test_cli_run_missing_file(tmp_path, capsys):
    assert cli.main(["run", str(tmp_path / "missing.py")]) == 1
    assert "cannot read" in capsys.readouterr().err


def test_render_keeps_trailing_newlines():
    body = dict(ACCEPTED, output="a\n\n\n")
    session = EditorSession(BRIDGE_URL, transport=bridge_transport(body=body))
    session.set_source("x")
    session.submit()

    assert session.render() == "Status: Accepted (3)\n--- Output ---\na\n\n\n"


def test_cli_run_missing_stdin_file(tmp_path, capsys):
    source = tmp_path / "echo.py"
    source.write_text("print(input())\n")

    code = cli.main(["run", str(source), "--stdin-file", str(tmp_path / "missing.txt")])

    assert code == 1
    assert "cannot read" in capsys.readouterr().err
