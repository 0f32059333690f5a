# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

from typing import Any, Dict, List, Optional, Tuple

from .exceptions import SessionError
from .session import CL_EXPUNGE, MailboxDescriptor, MailboxStatus, Session


class TestableSession(Session):
    """In-memory :py:class:`imapbox.session.Session`.

    This class should only be used in tests, where you can safely
    exercise imapbox without running commands on a real IMAP account.
    *mailboxes* are raw, fully-qualified names as a server would list
    them. Every command is recorded in :py:attr:`calls` as a
    ``(command, argument)`` tuple.
    """

    __test__ = False  # not a test case, despite the name

    def __init__(self, mailboxes=()):
        self.mailboxes: Dict[Any, List[Dict[str, Any]]] = {}
        for name in mailboxes:
            self.mailboxes[name] = []
        self.calls: List[Tuple[str, Any]] = []
        self.selected: Optional[str] = None
        self.fail_create = False
        self.fail_delete = False
        self.fail_append = False
        self._next_uid = 1
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def add(self, name, message: bytes, flags=()) -> int:
        """Store *message* in mailbox *name* without recording a call."""
        uid = self._next_uid
        self._next_uid += 1
        self.mailboxes[name].append(
            {"uid": uid, "message": message, "flags": tuple(flags), "recent": True}
        )
        return uid

    def select_calls(self) -> List[str]:
        return [arg for cmd, arg in self.calls if cmd == "select"]

    def list_mailboxes(self, prefix: str, pattern: str = "*") -> List[MailboxDescriptor]:
        self.calls.append(("list", (prefix, pattern)))
        return [
            MailboxDescriptor(name, "/")
            for name in self.mailboxes
            if _key(name).startswith(prefix)
        ]

    def select_mailbox(self, name: str) -> Dict[str, Any]:
        self.calls.append(("select", name))
        if name not in self.mailboxes:
            self.selected = None
            raise SessionError("no such mailbox: %s" % name)
        self.selected = name
        return {"exists": len(self.mailboxes[name])}

    def current_status(self) -> MailboxStatus:
        self.calls.append(("status", None))
        messages = self._selected_messages()
        recent = sum(1 for m in messages if m["recent"])
        return MailboxStatus(self.selected, len(messages), recent)

    def create_mailbox(self, name: str) -> bool:
        self.calls.append(("create", name))
        if self.fail_create or name in self.mailboxes:
            return False
        self.mailboxes[name] = []
        return True

    def delete_mailbox(self, name: str) -> bool:
        self.calls.append(("delete", name))
        if self.fail_delete or name not in self.mailboxes:
            return False
        del self.mailboxes[name]
        if self.selected == name:
            self.selected = None
        return True

    def message_count(self) -> int:
        self.calls.append(("count", None))
        return len(self._selected_messages())

    def recent_count(self) -> int:
        self.calls.append(("recent", None))
        return sum(1 for m in self._selected_messages() if m["recent"])

    def mailbox_info(self) -> Dict[str, Any]:
        self.calls.append(("info", None))
        messages = self._selected_messages()
        return {
            "mailbox": self.selected,
            "messages": len(messages),
            "recent": sum(1 for m in messages if m["recent"]),
            "deleted": sum(1 for m in messages if b"\\Deleted" in m["flags"]),
        }

    def search_uids(self, query: str) -> Optional[List[int]]:
        self.calls.append(("search", query))
        return [m["uid"] for m in self._selected_messages()]

    def fetch_overview(self, sequence) -> List[Any]:
        self.calls.append(("overview", sequence))
        wanted = _parse_sequence(sequence)
        return [
            {"uid": m["uid"], "flags": m["flags"], "size": len(m["message"])}
            for m in self._selected_messages()
            if wanted(m["uid"])
        ]

    def fetch_message(self, identifier: int, uid: bool = True) -> bytes:
        self.calls.append(("fetch", (identifier, uid)))
        messages = self._selected_messages()
        if uid:
            for m in messages:
                if m["uid"] == identifier:
                    return m["message"]
        elif 0 < identifier <= len(messages):
            return messages[identifier - 1]["message"]
        raise SessionError("message %r not found" % identifier)

    def append_message(self, name: str, message) -> bool:
        self.calls.append(("append", name))
        if self.fail_append or name not in self.mailboxes:
            return False
        if isinstance(message, str):
            message = message.encode("ascii")
        self.add(name, message)
        return True

    def expunge(self) -> None:
        self.calls.append(("expunge", None))
        messages = self._selected_messages()
        messages[:] = [m for m in messages if b"\\Deleted" not in m["flags"]]

    def close(self, flag: int = 0) -> bool:
        self.calls.append(("close", flag))
        if self._closed:
            return False
        if flag & CL_EXPUNGE and self.selected is not None:
            self.expunge()
        self._closed = True
        self.selected = None
        return True

    def _selected_messages(self) -> List[Dict[str, Any]]:
        if self._closed:
            raise SessionError("session is closed")
        if self.selected is None:
            raise SessionError("no mailbox selected")
        return self.mailboxes[self.selected]


def _key(name) -> str:
    if isinstance(name, bytes):
        return name.decode("utf-8", "ignore")
    return name


def _parse_sequence(sequence):
    """Return a predicate matching the UIDs in *sequence*."""
    if isinstance(sequence, (list, tuple)):
        wanted = set(sequence)
        return lambda uid: uid in wanted

    ranges = []
    for part in str(sequence).split(","):
        start, _, end = part.partition(":")
        if not end:
            end = start
        ranges.append((int(start), None if end == "*" else int(end)))
    return lambda uid: any(
        lo <= uid and (hi is None or uid <= hi) for lo, hi in ranges
    )
