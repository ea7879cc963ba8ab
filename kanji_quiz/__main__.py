"""CLI entry point for kanji-quiz.

Usage:
  python -m kanji_quiz serve [--port PORT] [--host HOST]
  python -m kanji_quiz pool
  python -m kanji_quiz generate [--level N] [--count N]
  python -m kanji_quiz quiz [--level N]
"""
from __future__ import annotations

import asyncio
import logging
import sys

from kanji_quiz.pool import LEVELS


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "pool":
        _pool()
    elif command == "generate":
        _generate(args[1:])
    elif command == "quiz":
        _quiz(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, pool, generate, quiz")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _parse_level(args: list[str], default: str) -> str:
    level = _parse_flag(args, "--level", default).upper().removeprefix("N")
    if level not in LEVELS:
        print(f"Unknown level: {level} (expected one of {', '.join(LEVELS)})")
        sys.exit(1)
    return level


def _serve(args: list[str]):
    import uvicorn

    port = int(_parse_flag(args, "--port", "8765"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    print(f"Starting Kanji Quiz on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "kanji_quiz.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _load():
    from kanji_quiz.config import load_settings
    from kanji_quiz.parsers.kanji_parser import parse_kanji_file

    settings = load_settings()
    return settings, parse_kanji_file(settings.kanji_data_path)


def _make_session(args: list[str]):
    from kanji_quiz.providers.registry import build_backend
    from kanji_quiz.session import QuizSession

    settings, data = _load()
    level = _parse_level(args, settings.default_level)
    try:
        backend = build_backend(settings, data)
    except ValueError as e:
        print(f"Backend unavailable: {e}")
        sys.exit(1)
    return QuizSession(
        backend,
        data,
        level=level,
        max_new_tokens=settings.max_new_tokens,
        timeout=settings.request_timeout,
    )


def _pool():
    from kanji_quiz.pool import pool_sizes

    settings, data = _load()
    print(f"Kanji data: {settings.kanji_data_path} ({len(data)} entries)")
    for level, size in pool_sizes(data).items():
        print(f"  N{level}: {size} kanji")


def _generate(args: list[str]):
    logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")
    count = int(_parse_flag(args, "--count", "1"))
    session = _make_session(args)

    print(f"Generating {count} N{session.level} questions using {session.backend.name()}...")
    ok = 0
    for i in range(count):
        question = asyncio.run(session.generate_one())
        if question is None:
            print(f"  [{i + 1}/{count}] FAIL {session.state.error}")
            continue
        ok += 1
        print(f"  [{i + 1}/{count}] {question.kanji}  {question.prompt}")
        for label, choice in zip("ABCD", question.choices):
            marker = "*" if choice == question.answer else " "
            print(f"        {marker} {label}. {choice}")
    print(f"\nGenerated {ok}/{count} questions")


def _quiz(args: list[str]):
    session = _make_session(args)
    if session.pool_size == 0:
        print(f"No kanji found for N{session.level}.")
        sys.exit(1)

    while True:
        print("\nGenerating...")
        question = asyncio.run(session.generate_one())
        if question is None:
            print(session.state.error)
        else:
            print(f"\n{question.prompt}")
            for label, choice in zip("ABCD", question.choices):
                print(f"  {label}. {choice}")
            picked = ""
            while picked not in ("A", "B", "C", "D"):
                picked = input("Your answer (A-D): ").strip().upper()
            result = session.select(question.choices["ABCD".index(picked)])
            if result == "correct":
                print("Nice! Keep going.")
            else:
                print(f"Answer: {question.answer}")
        if input("\nNext question? [Y/n] ").strip().lower() == "n":
            break


if __name__ == "__main__":
    main()
