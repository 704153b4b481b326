"""
Console front end for the dynamic form.

    dynaform-form --base-url http://localhost:3000/api

Prompts for each field in order, autosaves the draft while answering, then
validates and submits. Invalid answers are asked for again.
"""
import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional

from dynaform.client.api_client import FormApiClient
from dynaform.client.draft_cache import file_draft_cache
from dynaform.client.errors import ApiError
from dynaform.client.form_session import DynamicFormSession
from dynaform.client.renderers import RendererKind, Widget
from dynaform.client.settings import client_settings

logger = logging.getLogger(__name__)

CONFIG_UNAVAILABLE = "Unable to load form configuration. Please check your backend connection."
NO_FIELDS = "No form fields found. Please configure form fields in your backend."

Prompt = Callable[[str], str]


def describe(widget: Widget) -> str:
    lines = [widget.display_label]
    if widget.kind in (RendererKind.dropdown, RendererKind.radio_group):
        for number, option in enumerate(widget.options, start=1):
            marker = "*" if option == widget.value else " "
            lines.append(f"  {marker} {number}. {option}")
    if widget.helper_text:
        lines.append(f"  ({widget.helper_text})")
    return "\n".join(lines)


def parse_choice(widget: Widget, raw: str) -> str:
    """
    Answer typed for a widget. An empty line keeps the current value; option
    widgets accept either the option number or its text.
    """
    raw = raw.strip()
    if raw == "":
        return widget.value
    if widget.kind in (RendererKind.dropdown, RendererKind.radio_group):
        if raw.isdigit() and 1 <= int(raw) <= len(widget.options):
            return widget.options[int(raw) - 1]
        for option in widget.options:
            if option.lower() == raw.lower():
                return option
        return ""
    return raw


async def _ask(prompt: Prompt, text: str) -> str:
    return await asyncio.to_thread(prompt, text)


async def fill_form(session: DynamicFormSession, prompt: Prompt = input, out=sys.stdout) -> bool:
    while True:
        for widget in session.widgets():
            print(describe(widget), file=out)
            raw = await _ask(prompt, f"[{widget.value}] > ")
            widget.change(parse_choice(widget, raw))

        submitted = await session.submit()
        message = session.messages.message
        if message is not None:
            print(message.text, file=out)
        if submitted:
            return True
        if not session.errors:
            return False
        for name, error in session.errors.items():
            print(f"  {name}: {error}", file=out)


async def run(args: argparse.Namespace, prompt: Prompt = input, out=sys.stdout) -> int:
    drafts = file_draft_cache(args.draft_path)
    async with FormApiClient(base_url=args.base_url) as api:
        try:
            fields = await api.get_form_config()
        except ApiError as exc:
            logger.error("Failed to load form configuration: %s", exc.message)
            print(CONFIG_UNAVAILABLE, file=out)
            return 1

        if not fields:
            print(NO_FIELDS, file=out)
            return 1

        async with DynamicFormSession(fields, api, drafts) as session:
            if args.clear_draft:
                session.clear_draft()
            else:
                session.restore_draft()
            message = session.messages.message
            if message is not None:
                print(message.text, file=out)
            submitted = await fill_form(session, prompt, out)
    return 0 if submitted else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fill in the dynamic form from the terminal")
    parser.add_argument("--base-url", default=client_settings.API_BASE_URL, help="API base URL")
    parser.add_argument("--draft-path", default=client_settings.DRAFT_PATH, help="Draft file location")
    parser.add_argument("--clear-draft", action="store_true", help="Discard any saved draft before starting")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return asyncio.run(run(args))
    except (KeyboardInterrupt, EOFError):
        return 130


if __name__ == "__main__":
    sys.exit(main())
