# tinymud/game/dispatch.py

import logging

from .errors import MudError
from .parsing import Arguments
from .states import STATE_HANDLERS

log = logging.getLogger(__name__)


def process_input(session, line: str) -> None:
    """
    Route one input line by connection state. Any MudError a handler
    raises ends up here as one line of output; the prompt always follows.
    """
    handler = STATE_HANDLERS[session.state]
    try:
        handler(session, Arguments(line))
    except MudError as e:
        log.debug("%s: %s error: %s", session.address, e.kind.value, e)
        session.enqueue(f"{e}\n")

    session.enqueue(session.prompt)
