from __future__ import annotations

import argparse
import sys
from typing import Optional

from formbot.errors import InvalidProfileConfig
from formbot.models import AppConfig, Category, load_profiles
from formbot.services.engine import AnswerEngine
from formbot.services.prompt import ConsolePrompter, UnavailablePrompter
from formbot.utils.logger import setup_logger

CATEGORIES = [c.value for c in Category]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="formbot",
        description="Answer job application form questions from learned answers",
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to config.yaml (default: config.yaml; built-in defaults if missing)",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Job profile key to answer experience/salary questions with",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    ask = sub.add_parser("ask", help="Resolve one question and learn the answer")
    ask.add_argument("category", choices=CATEGORIES)
    ask.add_argument("question")
    ask.add_argument(
        "--no-prompt",
        action="store_true",
        help="Never prompt; report UNAVAILABLE instead",
    )

    learn = sub.add_parser("learn", help="Store an answer for a question")
    learn.add_argument("category", choices=CATEGORIES)
    learn.add_argument("question")
    learn.add_argument("answer")

    sub.add_parser("stats", help="Show how many answers each store holds")

    clear = sub.add_parser("clear", help="Delete all answers of one or every store")
    clear.add_argument("category", nargs="?", choices=CATEGORIES, default=None)
    clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    sub.add_parser("profiles", help="Validate and list job profiles")

    fill = sub.add_parser("fill", help="Open a job page and answer its application form")
    fill.add_argument("url")
    fill.add_argument(
        "--steps",
        type=int,
        default=10,
        help="Max wizard steps to fill before handing over (default: 10)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = AppConfig.load(args.config, missing_ok=True)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2
    logger = setup_logger(config.log_file)

    if args.command == "profiles":
        return _cmd_profiles(config)

    interactive = args.command in ("ask", "fill") and not getattr(args, "no_prompt", False)
    prompter = ConsolePrompter() if interactive else UnavailablePrompter()
    try:
        engine = AnswerEngine.from_config(config, prompter=prompter, logger=logger)
        if args.profile:
            engine.select_profile(args.profile)
    except InvalidProfileConfig as e:
        logger.error(str(e))
        return 2

    if args.command == "ask":
        resolution = engine.resolve_answer(args.category, args.question)
        if not resolution.resolved:
            print(f"UNAVAILABLE: no answer for {args.question!r}")
            return 1
        print(f"{resolution.status.value}: {resolution.value} ({resolution.source})")
        return 0

    if args.command == "learn":
        try:
            engine.learn(args.category, args.question, args.answer)
        except ValueError as e:
            print(e, file=sys.stderr)
            return 2
        print(f"Stored {args.category} answer for {args.question!r}")
        return 0

    if args.command == "stats":
        for category, size in engine.stats().items():
            print(f"{category:<10} {size}")
        return 0

    if args.command == "clear":
        target = args.category or "all"
        if not args.yes:
            reply = input(f"Delete {target} stored answers? [y/N]: ").strip().lower()
            if reply != "y":
                print("Aborted.")
                return 1
        engine.clear(args.category)
        return 0

    if args.command == "fill":
        return _cmd_fill(engine, config, args.url, args.steps, logger)

    return 2


def _cmd_profiles(config: AppConfig) -> int:
    path = config.profiles.path
    if not path:
        print("No profiles file configured.", file=sys.stderr)
        return 2
    try:
        profiles = load_profiles(path)
    except InvalidProfileConfig as e:
        print(e, file=sys.stderr)
        return 2
    for key, profile in profiles.items():
        marker = "*" if key == config.profiles.active else " "
        queries = ", ".join(profile.search_queries)
        print(f"{marker} {key}: {profile.title} [{queries}]")
    return 0


def _cmd_fill(engine: AnswerEngine, config: AppConfig, url: str, steps: int, logger) -> int:
    from formbot.bot import FormFiller
    from formbot.services.browser import open_form_page

    filler = FormFiller(engine, logger=logger)
    with open_form_page(config.camoufox, url, logger=logger) as page:
        input("Open the application form in the browser, then press Enter to fill it... ")

        for step in range(1, steps + 1):
            outcomes = filler.fill(page)
            logger.info(f"Step {step}: answered {sum(o.applied for o in outcomes)}/{len(outcomes)} questions")
            if not filler.advance(page):
                break

        if filler.unresolved:
            logger.warning("Unresolved questions: " + "; ".join(filler.unresolved))
        input("Review and submit the application in the browser, then press Enter to close... ")
    return 0 if not filler.unresolved else 1
