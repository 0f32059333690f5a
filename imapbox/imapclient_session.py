# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

from contextlib import contextmanager
from logging import getLogger
from typing import Any, Dict, List, Optional

from imapclient.exceptions import IMAPClientError
from imapclient.util import to_unicode

from .exceptions import SessionError
from .session import CL_EXPUNGE, MailboxDescriptor, MailboxStatus, Session

logger = getLogger(__name__)

__all__ = ["IMAPClientSession"]

OVERVIEW_ITEMS = [b"FLAGS", b"RFC822.SIZE", b"INTERNALDATE"]


def _status_dict(response: Dict[bytes, Any]) -> Dict[str, Any]:
    return dict((to_unicode(key).lower(), value) for key, value in response.items())


class IMAPClientSession(Session):
    """A :py:class:`imapbox.session.Session` backed by an authenticated
    :py:class:`imapclient.IMAPClient`.

    The session keeps track of the mailbox it selected itself, so the
    wrapped client should not be used to select folders directly.
    Folder names are encoded to modified UTF-7 by IMAPClient, except
    for LIST results which are returned raw so that
    :py:func:`imapbox.imap_utf7.decode_mailbox_name` sees them as the
    server sent them.
    """

    def __init__(self, client):
        self._client = client
        self._selected: Optional[str] = None
        self._status: Dict[str, Any] = {}
        self._closed = False

    @property
    def client(self):
        return self._client

    @property
    def closed(self) -> bool:
        return self._closed

    def list_mailboxes(self, prefix: str, pattern: str = "*") -> List[MailboxDescriptor]:
        folder_encode = self._client.folder_encode
        self._client.folder_encode = False
        try:
            folders = self._client.list_folders(prefix, pattern)
        except IMAPClientError as e:
            raise SessionError("LIST %r failed: %s" % (prefix, e)) from e
        finally:
            self._client.folder_encode = folder_encode

        out = []
        for flags, delimiter, name in folders:
            if delimiter is not None:
                delimiter = to_unicode(delimiter)
            out.append(MailboxDescriptor(name, delimiter, tuple(flags)))
        return out

    def select_mailbox(self, name: str) -> Dict[str, Any]:
        logger.debug("< SELECT %s", name)
        try:
            response = self._client.select_folder(name)
        except IMAPClientError as e:
            # A failed SELECT leaves no mailbox selected (RFC 3501 6.3.1)
            self._selected = None
            raise SessionError("could not select %r: %s" % (name, e)) from e
        self._selected = name
        self._status = _status_dict(response)
        return dict(self._status)

    def current_status(self) -> MailboxStatus:
        name = self._require_selected()
        try:
            _, responses = self._client.noop()
        except IMAPClientError as e:
            self._selected = None
            raise SessionError("session is no longer usable: %s" % e) from e

        counts = self._track_untagged(responses)
        return MailboxStatus(name, counts.get(b"EXISTS"), counts.get(b"RECENT"))

    def create_mailbox(self, name: str) -> bool:
        try:
            self._client.create_folder(name)
        except IMAPClientError as e:
            logger.debug("CREATE %s failed: %s", name, e)
            return False
        return True

    def delete_mailbox(self, name: str) -> bool:
        try:
            self._client.delete_folder(name)
        except IMAPClientError as e:
            logger.debug("DELETE %s failed: %s", name, e)
            return False
        if name == self._selected:
            self._selected = None
        return True

    # Counts come from SELECT and later untagged replies. STATUS must not
    # be used on the selected mailbox (RFC 3501 6.3.10).
    def message_count(self) -> int:
        self._require_selected()
        return self._status.get("exists", 0)

    def recent_count(self) -> int:
        self._require_selected()
        return self._status.get("recent", 0)

    def mailbox_info(self) -> Dict[str, Any]:
        info = {"mailbox": self._require_selected()}
        info.update(self._status)
        info["messages"] = self._status.get("exists", 0)
        return info

    def search_uids(self, query: str) -> List[int]:
        self._require_selected()
        charset = None if query.isascii() else "UTF-8"
        with self._use_uid(True):
            try:
                return list(self._client.search(query, charset=charset))
            except (IMAPClientError, UnicodeError) as e:
                raise SessionError("SEARCH %r failed: %s" % (query, e)) from e

    def fetch_overview(self, sequence) -> List[Dict[str, Any]]:
        self._require_selected()
        with self._use_uid(True):
            try:
                response = self._client.fetch(sequence, OVERVIEW_ITEMS)
            except IMAPClientError as e:
                raise SessionError("FETCH %r failed: %s" % (sequence, e)) from e

        return [
            {
                "uid": uid,
                "msgno": data.get(b"SEQ"),
                "flags": data.get(b"FLAGS", ()),
                "size": data.get(b"RFC822.SIZE"),
                "date": data.get(b"INTERNALDATE"),
            }
            for uid, data in sorted(response.items())
        ]

    def fetch_message(self, identifier: int, uid: bool = True) -> bytes:
        self._require_selected()
        with self._use_uid(uid):
            try:
                response = self._client.fetch([identifier], [b"RFC822"])
            except IMAPClientError as e:
                raise SessionError("FETCH %r failed: %s" % (identifier, e)) from e

        data = response.get(identifier)
        if not data or b"RFC822" not in data:
            raise SessionError("message %r not found" % identifier)
        return data[b"RFC822"]

    def append_message(self, name: str, message) -> bool:
        try:
            self._client.append(name, message)
        except IMAPClientError as e:
            logger.warning("APPEND to %s failed: %s", name, e)
            return False
        return True

    def expunge(self) -> None:
        self._require_selected()
        try:
            response = self._client.expunge()
        except IMAPClientError as e:
            raise SessionError("EXPUNGE failed: %s" % e) from e
        if isinstance(response, tuple) and len(response) == 2:
            self._track_untagged(response[1])

    def close(self, flag: int = 0) -> bool:
        if self._closed:
            return False

        try:
            if flag & CL_EXPUNGE and self._selected is not None:
                # CLOSE removes \Deleted messages as a side effect
                self._client.close_folder()
            self._client.logout()
            return True
        except Exception as e:
            logger.info("Could not close the connection cleanly: %s", e)
            try:
                self._client.shutdown()
            except Exception as shutdown_error:
                logger.info("Could not shut the connection down: %s", shutdown_error)
            return False
        finally:
            self._closed = True
            self._selected = None

    def _require_selected(self) -> str:
        if self._closed:
            raise SessionError("session is closed")
        if self._selected is None:
            raise SessionError("no mailbox selected")
        return self._selected

    def _track_untagged(self, responses) -> Dict[bytes, int]:
        counts = {}
        for item in responses:
            if len(item) < 2 or not isinstance(item[0], int):
                continue
            if item[1] in (b"EXISTS", b"RECENT"):
                counts[item[1]] = item[0]
                self._status[to_unicode(item[1]).lower()] = item[0]
            elif item[1] == b"EXPUNGE":
                self._status["exists"] = max(self._status.get("exists", 0) - 1, 0)
        return counts

    @contextmanager
    def _use_uid(self, use_uid: bool):
        previous = self._client.use_uid
        self._client.use_uid = use_uid
        try:
            yield
        finally:
            self._client.use_uid = previous
