# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

import abc
import dataclasses
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

__all__ = ["Session", "MailboxDescriptor", "MailboxStatus", "CL_EXPUNGE"]

# Flag for Session.close(): expunge the selected mailbox before logging out
CL_EXPUNGE = 32768


@dataclasses.dataclass(frozen=True)
class MailboxDescriptor:
    """One entry of a LIST response.

    *name* is the raw, fully-qualified name exactly as the server sent
    it (modified UTF-7, namespace prefix included).
    """

    name: Union[bytes, str]
    delimiter: Optional[str] = None
    flags: Tuple[bytes, ...] = ()


@dataclasses.dataclass(frozen=True)
class MailboxStatus:
    """Status of the session's currently selected mailbox."""

    mailbox: str
    messages: Optional[int] = None
    recent: Optional[int] = None


class Session(abc.ABC):
    """An authenticated IMAP session that can have at most one
    selected mailbox at a time.

    Mailbox names passed to and returned from a Session are
    fully-qualified, i.e. they include the namespace prefix.
    Implementations raise :py:class:`imapbox.exceptions.SessionError`
    when a command fails, except where a method is documented to
    report failure through its return value.
    """

    @property
    @abc.abstractmethod
    def closed(self) -> bool:
        """``True`` once the session has been closed."""

    @abc.abstractmethod
    def list_mailboxes(
        self, prefix: str, pattern: str = "*"
    ) -> List[MailboxDescriptor]:
        """List the mailboxes below *prefix* matching *pattern*."""

    @abc.abstractmethod
    def select_mailbox(self, name: str) -> Dict[str, Any]:
        """Make *name* the selected mailbox, returning its status."""

    @abc.abstractmethod
    def current_status(self) -> MailboxStatus:
        """Return the status of the selected mailbox.

        Raises SessionError if no mailbox is selected or the session
        has gone stale.
        """

    @abc.abstractmethod
    def create_mailbox(self, name: str) -> bool:
        pass

    @abc.abstractmethod
    def delete_mailbox(self, name: str) -> bool:
        pass

    @abc.abstractmethod
    def message_count(self) -> int:
        """Number of messages in the selected mailbox."""

    @abc.abstractmethod
    def recent_count(self) -> int:
        """Number of recent messages in the selected mailbox."""

    @abc.abstractmethod
    def mailbox_info(self) -> Dict[str, Any]:
        """Flat status snapshot of the selected mailbox."""

    @abc.abstractmethod
    def search_uids(self, query: str) -> Optional[List[int]]:
        """UIDs in the selected mailbox matching *query*.

        An empty or ``None`` result means nothing matched.
        """

    @abc.abstractmethod
    def fetch_overview(self, sequence: Union[str, Sequence[int]]) -> List[Any]:
        """Summary records for the UIDs in *sequence*.

        Each record is a mapping with at least a ``"uid"`` key.
        """

    @abc.abstractmethod
    def fetch_message(self, identifier: int, uid: bool = True) -> bytes:
        """Return the full RFC822 text of one message."""

    @abc.abstractmethod
    def append_message(self, name: str, message: Union[bytes, str]) -> bool:
        pass

    @abc.abstractmethod
    def expunge(self) -> None:
        """Remove messages flagged as deleted from the selected mailbox."""

    @abc.abstractmethod
    def close(self, flag: int = 0) -> bool:
        """Release the session. *flag* semantics are adapter specific;
        :py:data:`CL_EXPUNGE` is understood by all bundled adapters.
        """
