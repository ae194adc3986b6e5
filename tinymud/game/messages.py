# tinymud/game/messages.py

import logging
from pathlib import Path
from typing import Dict, Optional

log = logging.getLogger(__name__)


def expand_newlines(text: str) -> str:
    """`%r` in data files stands for a line break."""
    return text.replace("%r", "\n")


class MessageCatalog:
    """Canned texts keyed case-insensitively. Unknown keys give ''."""

    def __init__(self, messages: Optional[Dict[str, str]] = None):
        self._messages: Dict[str, str] = {}
        for key, text in (messages or {}).items():
            self._messages[key.lower()] = text

    def __getitem__(self, key: str) -> str:
        return self._messages.get(key.lower(), "")

    def __contains__(self, key: str) -> bool:
        return key.lower() in self._messages

    def __len__(self) -> int:
        return len(self._messages)


def load_messages(path) -> MessageCatalog:
    """
    Each line is `<key> <text>`, e.g. `motd Hi there!%r`.
    """
    path = Path(path)
    messages: Dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as f:
            for raw_line in f:
                parts = raw_line.rstrip("\r\n").lstrip().split(None, 1)
                if not parts:
                    continue
                key = parts[0].lower()
                text = parts[1] if len(parts) > 1 else ""
                messages[key] = expand_newlines(text)
    except (OSError, UnicodeDecodeError) as e:
        log.error("Could not open messages file %s: %s", path, e)
        return MessageCatalog()

    log.info("Loaded %d messages", len(messages))
    return MessageCatalog(messages)
