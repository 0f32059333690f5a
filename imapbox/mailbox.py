# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

from collections.abc import Mapping
from logging import getLogger
from typing import Any, Optional, Union

from .exceptions import SessionError
from .message import Message, MessageIterator

logger = getLogger(__name__)

__all__ = ["Mailbox"]

# Marks the end of the server part in names such as "{imap.example.com}INBOX"
NAMESPACE_MARKER = "}"


def short_name(fully_qualified_name: str, namespace_prefix: Optional[str] = None) -> str:
    """Return the part of *fully_qualified_name* after the namespace.

    Without a matching *namespace_prefix* everything up to the first
    namespace marker is dropped.
    """
    if namespace_prefix is not None and fully_qualified_name.startswith(
        namespace_prefix
    ):
        return fully_qualified_name[len(namespace_prefix) :]
    return fully_qualified_name[fully_qualified_name.find(NAMESPACE_MARKER) + 1 :]


class Mailbox:
    """An IMAP mailbox (commonly referred to as a 'folder').

    Mailbox objects are obtained from a
    :py:class:`imapbox.connection.Connection` and hold no server-side
    state of their own. The session they share with the connection
    can only have one mailbox selected at a time, so every method
    which operates on the selected mailbox first makes sure this
    mailbox is the one selected, re-selecting it if another mailbox
    (or another user of the session) selected something else in the
    meantime.
    """

    def __init__(self, fully_qualified_name: str, connection):
        self._fully_qualified_name = fully_qualified_name
        self._connection = connection
        self._name = short_name(fully_qualified_name, connection.namespace_prefix)

    @property
    def name(self) -> str:
        """The mailbox name without the namespace prefix."""
        return self._name

    @property
    def fully_qualified_name(self) -> str:
        return self._fully_qualified_name

    @property
    def connection(self):
        return self._connection

    def count(self) -> int:
        """Return the number of messages in this mailbox."""
        self._ensure_selected()
        return self._session.message_count()

    def get_messages(self, search=None) -> MessageIterator:
        """Return the messages matching *search*.

        *search* is a :py:class:`imapbox.search.SearchExpression` or
        anything else that renders to an IMAP search string. All
        messages are returned when it is omitted or empty.
        """
        self._ensure_selected()

        query = str(search) if search else "ALL"
        uids = self._session.search_uids(query)
        if not uids:
            uids = []

        return MessageIterator(self._session, uids)

    def fetch_overview(self, sequence) -> MessageIterator:
        """Return the messages whose UIDs are given by *sequence*.

        *sequence* uses the server's sequence set syntax, e.g.
        ``"1:*"`` or ``"4,8,15"``, or is a list of UIDs.
        """
        self._ensure_selected()

        uids = []
        records = self._session.fetch_overview(sequence)
        if isinstance(records, (list, tuple)):
            for record in records:
                if isinstance(record, Mapping) and record.get("uid") is not None:
                    uids.append(record["uid"])

        return MessageIterator(self._session, uids)

    def reopen(self) -> None:
        """Select this mailbox again, if possible."""
        try:
            self._session.select_mailbox(self._fully_qualified_name)
        except SessionError as e:
            logger.debug("Could not reopen %s: %s", self._fully_qualified_name, e)

    def get_message(self, number: int) -> Message:
        """Return the message with sequence number *number*."""
        self._ensure_selected()
        return Message(self._session, number)

    def iterate(self) -> MessageIterator:
        """Return all messages in this mailbox."""
        return self.get_messages()

    def delete(self) -> None:
        """Delete this mailbox from the server."""
        self._connection.delete_mailbox(self)

    def expunge(self) -> "Mailbox":
        """Remove all messages flagged as deleted."""
        self._ensure_selected()
        self._session.expunge()
        return self

    def add_message(self, message: Union[bytes, str]) -> bool:
        """Append *message* (a complete RFC822 message) to this mailbox.

        The mailbox doesn't need to be selected for this.
        """
        return self._session.append_message(self._fully_qualified_name, message)

    @property
    def _session(self):
        return self._connection.session

    def _ensure_selected(self) -> None:
        # Never trust local state here: the session may have been
        # pointed at another mailbox since the last call.
        try:
            active = self._session.current_status().mailbox
        except SessionError:
            active = None

        if active != self._fully_qualified_name:
            logger.debug("Selecting %s (was %s)", self._fully_qualified_name, active)
            self._session.select_mailbox(self._fully_qualified_name)

    def __len__(self):
        return self.count()

    def __bool__(self):
        # Truth testing must not talk to the server through __len__
        return True

    def __iter__(self):
        return iter(self.iterate())

    def __eq__(self, other: Any):
        if not isinstance(other, Mailbox):
            return NotImplemented
        return (
            self._connection is other._connection
            and self._fully_qualified_name == other._fully_qualified_name
        )

    def __hash__(self):
        return hash((id(self._connection), self._fully_qualified_name))

    def __repr__(self):
        return "<Mailbox %r>" % self._name
