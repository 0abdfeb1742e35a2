"""
print-to-console

Log a line of text. Useful to check that an operation is wired to the
events you expect before pointing it at a real project.

Arguments:
    text : text to log; ``${{ outputs.<task> }}`` references are resolved first
"""

from collections.abc import Mapping

from opsbot.framework.context import EventContext
from opsbot.framework.logging import get_logger

log = get_logger(__name__)


def print_to_console(context: EventContext, args: Mapping[str, str]) -> str | None:
    text = args.get("text")
    if not text:
        log.error("print_to_console.no_text", reason="No 'text' provided in parameter.")
        return None
    log.info("print_to_console", text=text, event_type=context.event_type)
    return text
