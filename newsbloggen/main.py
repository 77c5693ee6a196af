"""Terminal entrypoint for NewsBlogGen.

This script walks through the three screens of the application:
1) landing banner
2) generator: collect keywords, period, tone and length, then draft
3) editor: chat with the assistant to refine, translate, undo and export
"""

from __future__ import annotations

import argparse
import sys
from concurrent.futures import Future
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple

from dotenv import load_dotenv

from .errors import GenerationFailure, OperationCancelled, RevisionRejected
from .gateway import create_gateway
from .markup import clean_html_to_text
from .models import GeneratorConfig, Length, Period, Tone
from .orchestrator import DRAFT_FAILED_MESSAGE, EXPORTED_MESSAGE, RevisionOrchestrator
from .output import default_filename, export_article
from .progress import ProgressEvent
from .utils.config_loader import ConfigError, SessionConfig, load_session_config
from .utils.logging import configure_logging, get_logger
from .utils.settings import GatewaySettings
from .view_state import ViewState, reduce

BANNER = (
    "NewsBlogGen\n"
    "Turn today's news into a ready-to-publish blog draft: "
    "domestic coverage, global case studies and images in one pass.\n"
)

HELP_TEXT = (
    "Type an instruction to revise the draft, or a command:\n"
    "  /translate <language>  translate the draft\n"
    "  /languages             list suggested languages\n"
    "  /undo                  restore the previous version\n"
    "  /preview               toggle between HTML and preview\n"
    "  /show                  print the current draft\n"
    "  /export [path]         save as .html, .doc or .txt\n"
    "  /back                  discard this draft and return to the generator\n"
    "  /quit                  exit\n"
)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="NewsBlogGen – draft, refine and translate news blog posts with an AI editor"
    )
    parser.add_argument(
        "--config",
        default="config/generator.yaml",
        help="Path to generator defaults (YAML); ignored if missing",
    )
    parser.add_argument("--keywords", help="Topic keywords for the draft")
    parser.add_argument("--period", choices=[p.value for p in Period], help="Search period")
    parser.add_argument("--tone", choices=[t.value for t in Tone], help="Writing tone")
    parser.add_argument("--length", choices=[ln.value for ln in Length], help="Target length")
    parser.add_argument(
        "--backend",
        choices=["gemini", "ollama"],
        default=None,
        help="Generation backend (default: PROCESSING_BACKEND or gemini)",
    )
    parser.add_argument("--export", default=None, help="Export the final draft to this path on exit")
    parser.add_argument(
        "--no-chat",
        action="store_true",
        help="Draft once and exit without opening the editor",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity",
    )
    return parser.parse_args(argv)


def build_generator_config(
    args: argparse.Namespace,
    session: SessionConfig,
    ask: Callable[[str], str] = input,
) -> GeneratorConfig:
    """Merge CLI flags over YAML defaults; prompt for keywords when none are known."""
    base = session.generator
    keywords = args.keywords or (base.keywords if base else "")
    while not keywords.strip():
        keywords = ask("Keywords: ")
    return GeneratorConfig(
        keywords=keywords,
        period=args.period or (base.period if base else Period.PAST_24_HOURS),
        tone=args.tone or (base.tone if base else Tone.ACADEMIC),
        length=args.length or (base.length if base else Length.STANDARD),
    )


def parse_command(line: str) -> Tuple[str, str]:
    """Split an editor line into (command, argument); free text is a refine."""
    text = line.strip()
    if not text.startswith("/"):
        return "refine", text
    name, _, arg = text[1:].partition(" ")
    return name.lower(), arg.strip()


def print_progress(event: ProgressEvent) -> None:
    if event.failed:
        print(f"  ✗ {event.message}")
    else:
        print(f"  [{event.percent:3d}%] {event.message}")


class ConversationPrinter:
    """Prints conversation entries that have not been shown yet."""

    def __init__(self, orchestrator: RevisionOrchestrator) -> None:
        self.orchestrator = orchestrator
        self.shown = 0

    def flush(self) -> None:
        entries = self.orchestrator.conversation
        for entry in entries[self.shown:]:
            if entry.speaker == "user":
                continue
            marker = {"warning": "!", "error": "x"}.get(entry.kind, ">")
            print(f"{marker} {entry.text}")
        self.shown = len(entries)


def wait_for(future: Future, orchestrator: RevisionOrchestrator):
    """Block on ``future``; Ctrl-C cancels the in-flight request instead of exiting."""
    try:
        return future.result()
    except KeyboardInterrupt:
        orchestrator.cancel()
        print("\nCancelled.")
        return None


def render_current(orchestrator: RevisionOrchestrator, view: ViewState) -> str:
    article = orchestrator.article
    if article is None:
        return ""
    body = article.body if view.active_tab == "edit" else clean_html_to_text(article.body)
    return f"# {article.title}\n\n{body}\n\n{' '.join(article.tags)}"


def run_generator(orchestrator: RevisionOrchestrator, config: GeneratorConfig, ask: Callable[[str], str] = input) -> bool:
    """Draft until success or until the user declines to retry."""
    logger = get_logger("nbg.agent")
    while True:
        print(f'Drafting "{config.keywords}" ({config.period.value}, {config.tone.value}, {config.length.value})')
        try:
            wait_for(orchestrator.submit_config(config), orchestrator)
        except GenerationFailure as exc:
            logger.warning("Draft failed: %s", exc)
            print(DRAFT_FAILED_MESSAGE)
            try:
                answer = ask("Retry with the same settings? [Y/n] ")
            except EOFError:
                return False
            if answer.strip().lower() in ("n", "no"):
                return False
            continue
        except OperationCancelled:
            return False
        return orchestrator.article is not None


def run_editor(
    orchestrator: RevisionOrchestrator,
    session: SessionConfig,
    view: ViewState,
    ask: Callable[[str], str] = input,
) -> ViewState:
    printer = ConversationPrinter(orchestrator)
    printer.flush()
    print(HELP_TEXT)
    while view.screen == "editor":
        try:
            line = ask("you> ")
        except EOFError:
            break
        command, arg = parse_command(line)
        try:
            if command == "refine":
                if arg:
                    wait_for(orchestrator.submit_instruction(arg), orchestrator)
            elif command == "translate":
                if not arg:
                    print("Usage: /translate <language>")
                else:
                    view = reduce(view, "language_chosen")
                    wait_for(orchestrator.submit_translation(arg), orchestrator)
            elif command == "languages":
                print(", ".join(session.languages))
            elif command == "undo":
                if not orchestrator.undo():
                    print("Nothing to undo.")
            elif command == "preview":
                view = reduce(view, "toggle_tab")
                print(render_current(orchestrator, view))
            elif command == "show":
                print(render_current(orchestrator, view))
            elif command == "export":
                view = reduce(view, "export_chosen")
                article = orchestrator.content.snapshot()
                path = Path(arg) if arg else Path(default_filename(article, "html"))
                saved = export_article(article, path)
                orchestrator.announce(EXPORTED_MESSAGE.format(path=saved))
            elif command == "back":
                try:
                    answer = ask("Going back will discard your current edits. Continue? [y/N] ")
                except EOFError:
                    break
                if answer.strip().lower() in ("y", "yes"):
                    view = reduce(view, "back_to_generator")
            elif command in ("quit", "exit"):
                break
            else:
                print(HELP_TEXT)
        except (RevisionRejected, ValueError) as exc:
            print(f"x {exc}")
        printer.flush()
    return view


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv(override=False)
    args = parse_args(argv)
    configure_logging(level=args.log_level)
    logger = get_logger("nbg.agent")

    session = SessionConfig()
    config_path = Path(args.config)
    if config_path.exists():
        logger.info("Loading generator defaults from %s", config_path)
        try:
            session = load_session_config(config_path)
        except ConfigError as exc:
            logger.exception("Failed to load configuration: %s", exc)
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 1

    settings = GatewaySettings()
    try:
        gateway = create_gateway(backend=args.backend, settings=settings)
    except (RuntimeError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 1

    print(BANNER)
    view = reduce(ViewState(), "start")
    while view.screen == "generator":
        try:
            config = build_generator_config(args, session)
        except ValueError as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 1
        except EOFError:
            return 0

        with RevisionOrchestrator(gateway, progress_interval=settings.progress_interval) as orchestrator:
            orchestrator.on_progress(print_progress)
            if not run_generator(orchestrator, config):
                return 0
            view = reduce(view, "draft_ready")

            if not args.no_chat:
                view = run_editor(orchestrator, session, view)
            # a draft discarded with /back is not exported
            if args.export and view.screen == "editor" and orchestrator.article is not None:
                print(f"Saved {export_article(orchestrator.article, args.export)}")
            if args.no_chat or view.screen == "editor":
                break
            # Back to the generator: ask for fresh keywords next round
            args.keywords = None
            session.generator = None
    return 0


if __name__ == "__main__":  # pragma: no cover - script entrypoint
    raise SystemExit(main())
