# tinymud/game/parsing.py

from typing import Optional

from .errors import InputError


class Arguments:
    """
    A line of player input consumed one word at a time, the way handlers
    read it: `word()` for the next token, `rest()` for whatever is left.
    """

    def __init__(self, text: str):
        self._text = text

    def __repr__(self) -> str:
        return f"Arguments({self._text!r})"

    def word(self) -> str:
        parts = self._text.split(None, 1)
        if not parts:
            self._text = ""
            return ""
        self._text = parts[1] if len(parts) > 1 else ""
        return parts[0]

    def integer(self) -> Optional[int]:
        """Next word as a number. A non-number is left in place and gives None."""
        parts = self._text.split(None, 1)
        if not parts:
            return None
        try:
            value = int(parts[0])
        except ValueError:
            return None
        self.word()
        return value

    def rest(self) -> str:
        text = self._text.strip()
        self._text = ""
        return text

    def peek_rest(self) -> str:
        return self._text.strip()

    def no_more(self) -> None:
        leftover = self.rest()
        if leftover:
            raise InputError(f"Unexpected input: {leftover}")
