# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

from collections.abc import Sequence
from typing import Iterable, Tuple

__all__ = ["Message", "MessageIterator"]


class Message:
    """A handle on one message of the session's selected mailbox.

    *number* is a UID when *uid* is true and a message sequence
    number otherwise. Nothing is fetched until :py:meth:`raw` is called.
    """

    def __init__(self, session, number: int, uid: bool = False):
        self._session = session
        self.number = number
        self.uid = uid

    def raw(self) -> bytes:
        """Fetch the full RFC822 text of the message."""
        return self._session.fetch_message(self.number, uid=self.uid)

    def __eq__(self, other):
        if not isinstance(other, Message):
            return NotImplemented
        return (self._session, self.number, self.uid) == (
            other._session,
            other.number,
            other.uid,
        )

    def __hash__(self):
        return hash((id(self._session), self.number, self.uid))

    def __repr__(self):
        kind = "uid" if self.uid else "number"
        return "<Message %s=%d>" % (kind, self.number)


class MessageIterator(Sequence):
    """Lazy, restartable sequence of :py:class:`Message` objects for a
    list of UIDs. Order of the UIDs given is preserved.
    """

    def __init__(self, session, identifiers: Iterable[int]):
        self._session = session
        self._identifiers: Tuple[int, ...] = tuple(identifiers)

    @property
    def identifiers(self) -> Tuple[int, ...]:
        return self._identifiers

    def __len__(self):
        return len(self._identifiers)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return MessageIterator(self._session, self._identifiers[index])
        return Message(self._session, self._identifiers[index], uid=True)

    def __repr__(self):
        return "<MessageIterator %d messages>" % len(self)
