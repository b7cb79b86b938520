"""
Error collection entity.

An ordered, set-like container of error messages. The engine keeps one
collection for the whole run and one per field.
"""

import re
from typing import Callable, Iterable, Iterator, List, Optional, Pattern, Union


class ErrorCollection:
    """
    Ordered collection of unique error messages.

    Adding a message that is already present is a no-op, so the same
    failure reported twice (for instance by a field-level `error`
    override shared by several directives) shows up once.
    """

    def __init__(self, messages: Optional[Iterable[str]] = None):
        self._messages: List[str] = []
        if messages:
            self.add(*messages)

    def add(self, *messages: str) -> None:
        """
        Add messages, skipping duplicates.

        Args:
            *messages: Messages to add
        """
        for message in messages:
            if message is None or message == "":
                continue
            message = str(message)
            if message not in self._messages:
                self._messages.append(message)

    def extend(self, other: "ErrorCollection") -> None:
        """Add every message of another collection."""
        self.add(*other.all())

    def clear(self) -> None:
        """Remove every message."""
        self._messages.clear()

    def count(self) -> int:
        """Number of messages held."""
        return len(self._messages)

    def all(self) -> List[str]:
        """Messages in insertion order."""
        return list(self._messages)

    def find(self, pattern: Union[str, Pattern]) -> List[str]:
        """
        Return the messages matching a regular expression.

        Args:
            pattern: Compiled pattern or pattern string

        Returns:
            List[str]: Matching messages
        """
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [m for m in self._messages if regex.search(m)]

    def to_string(
        self,
        delimiter: str = ", ",
        transform: Optional[Callable[[str], str]] = None
    ) -> str:
        """
        Join the messages into a single string.

        Args:
            delimiter: String placed between messages
            transform: Optional callable applied to each message first

        Returns:
            str: Joined messages
        """
        messages = self._messages
        if transform is not None:
            messages = [transform(m) for m in messages]
        return delimiter.join(messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __contains__(self, message: object) -> bool:
        return message in self._messages

    def __bool__(self) -> bool:
        return bool(self._messages)

    def __repr__(self) -> str:
        return f"ErrorCollection({self._messages!r})"
