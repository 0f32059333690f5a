# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

import dataclasses
import enum
from logging import getLogger
from typing import Any, Dict, Iterator, List, Tuple

from .exceptions import (
    InvalidSessionHandle,
    MailboxCreateFailed,
    MailboxDeleteFailed,
    MailboxNotFound,
)
from .imap_utf7 import decode_mailbox_name
from .mailbox import Mailbox
from .session import Session

logger = getLogger(__name__)

__all__ = ["Connection"]


class CacheState(enum.Enum):
    NOT_LOADED = "not loaded"
    LOADED = "loaded"
    INVALIDATED = "invalidated"


@dataclasses.dataclass(frozen=True)
class _Directory:
    """Decoded mailbox names and the Mailbox objects built from them.

    Both tuples are in server order and always the same length. A
    directory which isn't LOADED holds neither.
    """

    state: CacheState
    names: Tuple[str, ...] = ()
    mailboxes: Tuple[Mailbox, ...] = ()
    lossy: Tuple[str, ...] = ()

    @property
    def loaded(self) -> bool:
        return self.state is CacheState.LOADED


_NOT_LOADED = _Directory(CacheState.NOT_LOADED)
_INVALIDATED = _Directory(CacheState.INVALIDATED)


class Connection:
    """A connection to an IMAP server that is authenticated for a user.

    *session* is a :py:class:`imapbox.session.Session` which the
    connection owns until :py:meth:`close` is called.
    *namespace_prefix* is prepended to every mailbox name to form the
    name used in commands sent to the server, for example
    ``"{imap.example.com}"`` or ``"INBOX."``.

    The list of mailboxes is fetched from the server the first time it
    is needed and kept until a mailbox is created or deleted through
    this connection.
    """

    def __init__(self, session: Session, namespace_prefix: str = ""):
        if not isinstance(session, Session) or session.closed:
            raise InvalidSessionHandle("session must be an open imapbox Session")

        self._session = session
        self._namespace_prefix = namespace_prefix
        self._directory = _NOT_LOADED

    @property
    def session(self) -> Session:
        return self._session

    @property
    def namespace_prefix(self) -> str:
        return self._namespace_prefix

    @property
    def cache_state(self) -> CacheState:
        return self._directory.state

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if not self._session.closed:
            self.close()

    def count_messages(self) -> int:
        """Number of messages in the currently selected mailbox."""
        return self._session.message_count()

    def count_recent(self) -> int:
        """Number of recent messages in the currently selected mailbox."""
        return self._session.recent_count()

    def info(self) -> Dict[str, Any]:
        return dict(self._session.mailbox_info())

    def count(self) -> int:
        """Number of messages reported by the session, regardless of
        which mailbox (if any) a Mailbox object expects to be selected.
        """
        return self._session.message_count()

    def list_mailboxes(self) -> List[Mailbox]:
        """Get a list of mailboxes (also known as folders)."""
        return list(self._load().mailboxes)

    def list_mailbox_names(self) -> List[str]:
        """Get the decoded names of all mailboxes, in server order."""
        return list(self._load().names)

    def mailbox_names_lossy(self) -> List[str]:
        """Names which could only be partially decoded."""
        return list(self._load().lossy)

    def has_mailbox(self, name: str) -> bool:
        """Check that a mailbox with the given name exists."""
        return name in self._load().names

    def get_mailbox(self, name: str) -> Mailbox:
        """Get a mailbox by its name.

        Raises MailboxNotFound if there is no such mailbox.
        """
        if not self.has_mailbox(name):
            raise MailboxNotFound(name)

        return Mailbox(self._namespace_prefix + name, self)

    def create_mailbox(self, name: str) -> Mailbox:
        """Create a mailbox called *name* and return it."""
        if not self._session.create_mailbox(self._namespace_prefix + name):
            raise MailboxCreateFailed(name, self._namespace_prefix)

        logger.debug("Created mailbox %s", name)
        self._invalidate()
        return self.get_mailbox(name)

    def delete_mailbox(self, mailbox: Mailbox) -> None:
        """Delete *mailbox* from the server."""
        if not self._session.delete_mailbox(mailbox.fully_qualified_name):
            raise MailboxDeleteFailed(mailbox.name)

        logger.debug("Deleted mailbox %s", mailbox.name)
        self._invalidate()

    def close(self, flag: int = 0) -> bool:
        """Close the connection, releasing the session.

        *flag* is passed to :py:meth:`imapbox.session.Session.close`.
        """
        result = self._session.close(flag)
        logger.info("Connection closed")
        return result

    def __contains__(self, name: str) -> bool:
        return self.has_mailbox(name)

    def __iter__(self) -> Iterator[Mailbox]:
        return iter(self.list_mailboxes())

    def _invalidate(self) -> None:
        self._directory = _INVALIDATED

    def _load(self) -> _Directory:
        if self._directory.loaded:
            return self._directory

        names = []
        lossy = []
        descriptors = self._session.list_mailboxes(self._namespace_prefix, "*")
        for descriptor in descriptors:
            decoded = decode_mailbox_name(descriptor.name, self._namespace_prefix)
            if decoded.lossy:
                logger.warning(
                    "Mailbox name %r could not be fully decoded, using %r",
                    descriptor.name,
                    decoded.name,
                )
                lossy.append(decoded.name)
            names.append(decoded.name)

        mailboxes = [Mailbox(self._namespace_prefix + n, self) for n in names]
        self._directory = _Directory(
            CacheState.LOADED, tuple(names), tuple(mailboxes), tuple(lossy)
        )
        logger.debug("Loaded %d mailbox names", len(names))
        return self._directory
