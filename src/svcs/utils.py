"""Utility functions for svcs."""

from typing import Iterable

from .errors import EmptyMessageError

QUOTE = '"'


def normalize_message(raw: str) -> str:
    """Clean up a commit message as typed on the command line.

    Surrounding whitespace is trimmed. A message wrapped in a matching pair
    of double quotes loses both quotes; a lone leading or trailing quote is
    kept. The result is trimmed again.

    Examples:
        '  "fix typo"  ' -> 'fix typo'
        '"unbalanced'    -> '"unbalanced'

    Raises:
        EmptyMessageError: If nothing but whitespace (and quotes) remains
    """
    message = raw.strip()
    if len(message) >= 2 and message.startswith(QUOTE) and message.endswith(QUOTE):
        message = message[1:-1]
    message = message.strip()
    if not message:
        raise EmptyMessageError()
    return message


def join_message_words(words: Iterable[str]) -> str:
    """Join CLI words into one message, the way a shell would have split it."""
    return " ".join(words)


def short_id(commit_id: str, length: int = 12) -> str:
    return commit_id[:length]
