"""Command line entry point.

  onlinecompiler serve --port 5000
  onlinecompiler run hello.py --stdin "world"
  onlinecompiler run Main.java --language java --bridge-url http://localhost:5000
"""

import argparse
import sys

from .frontend import LANGUAGE_IDS, EditorSession, Phase, guess_language


def cmd_serve(args) -> int:
    import uvicorn

    from .config import Config
    from .main import create_app

    config = Config.from_env()
    app = create_app(config)
    uvicorn.run(app, host=args.host or config.host, port=args.port or config.port, log_level=config.log_level.lower())
    return 0


def cmd_run(args) -> int:
    try:
        with open(args.file, encoding="utf-8") as fh:
            source = fh.read()
    except OSError as exc:
        print(f"Error: cannot read {args.file}: {exc}", file=sys.stderr)
        return 1

    stdin = args.stdin or ""
    if args.stdin_file:
        try:
            with open(args.stdin_file, encoding="utf-8") as fh:
                stdin = fh.read()
        except OSError as exc:
            print(f"Error: cannot read {args.stdin_file}: {exc}", file=sys.stderr)
            return 1

    language = args.language or guess_language(args.file) or "python"
    session = EditorSession(args.bridge_url, timeout=args.timeout)
    session.set_language(language, args.language_id)
    if session.state.language_id is None:
        print(f"Error: unknown language {language!r}, pass --language-id", file=sys.stderr)
        return 1
    session.set_source(source)
    session.set_stdin(stdin)

    session.submit()
    print(session.render())
    return 0 if session.phase is Phase.SHOWING_RESULT and session.error is None else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="onlinecompiler", description="Compile and run code through Judge0.")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="start the compile bridge")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    run = sub.add_parser("run", help="send a source file to the bridge and print the result")
    run.add_argument("file")
    run.add_argument("--language", choices=sorted(LANGUAGE_IDS), default=None)
    run.add_argument("--language-id", type=int, default=None, help="raw Judge0 language id")
    run.add_argument("--stdin", default=None)
    run.add_argument("--stdin-file", default=None)
    run.add_argument("--bridge-url", default="http://localhost:5000")
    run.add_argument("--timeout", type=float, default=30)
    run.set_defaults(func=cmd_run)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
