# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

import unittest
from datetime import datetime
from unittest.mock import Mock, call, sentinel

from imapclient.exceptions import IMAPClientError

from imapbox.connection import Connection
from imapbox.exceptions import InvalidSessionHandle, SessionError
from imapbox.imapclient_session import IMAPClientSession
from imapbox.session import CL_EXPUNGE, MailboxDescriptor, MailboxStatus
from imapbox.search import SearchExpression, Subject


class IMAPClientSessionTest(unittest.TestCase):
    def setUp(self):
        self.client = Mock()
        self.client.folder_encode = True
        self.client.use_uid = True
        self.client.select_folder.return_value = {b"EXISTS": 3, b"RECENT": 1}
        self.client.noop.return_value = (b"NOOP completed", [])
        self.session = IMAPClientSession(self.client)

    def select(self, name="INBOX"):
        return self.session.select_mailbox(name)


class TestListMailboxes(IMAPClientSessionTest):
    def test_names_are_raw(self):
        seen = []

        def list_folders(directory, pattern):
            seen.append(self.client.folder_encode)
            return [
                ((b"\\HasNoChildren",), b"/", b"INBOX"),
                ((), b"/", b"Entw&APw-rfe"),
                ((), None, "123"),
            ]

        self.client.list_folders.side_effect = list_folders

        descriptors = self.session.list_mailboxes("", "*")

        self.assertEqual(seen, [False])
        self.assertTrue(self.client.folder_encode)
        self.client.list_folders.assert_called_once_with("", "*")
        self.assertEqual(
            descriptors,
            [
                MailboxDescriptor(b"INBOX", "/", (b"\\HasNoChildren",)),
                MailboxDescriptor(b"Entw&APw-rfe", "/", ()),
                MailboxDescriptor("123", None, ()),
            ],
        )

    def test_list_failure(self):
        self.client.list_folders.side_effect = IMAPClientError("badness")
        self.assertRaises(SessionError, self.session.list_mailboxes, "", "*")
        self.assertTrue(self.client.folder_encode)


class TestSelection(IMAPClientSessionTest):
    def test_select(self):
        self.assertEqual(self.select(), {"exists": 3, "recent": 1})
        self.client.select_folder.assert_called_once_with("INBOX")

    def test_current_status_without_selection(self):
        self.assertRaises(SessionError, self.session.current_status)
        self.assertFalse(self.client.noop.called)

    def test_current_status(self):
        self.select("INBOX.Sent")
        self.client.noop.return_value = (b"OK", [(4, b"EXISTS"), (1, b"RECENT")])
        self.assertEqual(
            self.session.current_status(), MailboxStatus("INBOX.Sent", 4, 1)
        )

    def test_stale_session(self):
        self.select()
        self.client.noop.side_effect = IMAPClientError("gone")
        self.assertRaises(SessionError, self.session.current_status)
        self.client.noop.side_effect = None
        self.assertRaises(SessionError, self.session.current_status)

    def test_failed_select_deselects(self):
        self.select()
        self.client.select_folder.side_effect = IMAPClientError("NO such mailbox")
        self.assertRaises(SessionError, self.select, "Nope")
        self.assertRaises(SessionError, self.session.current_status)


class TestMailboxCommands(IMAPClientSessionTest):
    def test_create(self):
        self.assertTrue(self.session.create_mailbox("INBOX.Archive"))
        self.client.create_folder.assert_called_once_with("INBOX.Archive")

    def test_create_failure(self):
        self.client.create_folder.side_effect = IMAPClientError("NO")
        self.assertFalse(self.session.create_mailbox("INBOX.Archive"))

    def test_delete(self):
        self.select("INBOX.Old")
        self.assertTrue(self.session.delete_mailbox("INBOX.Old"))
        self.client.delete_folder.assert_called_once_with("INBOX.Old")
        self.assertRaises(SessionError, self.session.current_status)

    def test_delete_failure(self):
        self.client.delete_folder.side_effect = IMAPClientError("NO")
        self.assertFalse(self.session.delete_mailbox("INBOX.Old"))

    def test_append(self):
        self.assertTrue(self.session.append_message("Sent", b"msg"))
        self.client.append.assert_called_once_with("Sent", b"msg")
        self.assertFalse(self.client.select_folder.called)

    def test_append_failure(self):
        self.client.append.side_effect = IMAPClientError("NO")
        self.assertFalse(self.session.append_message("Sent", b"msg"))


class TestSelectedCommands(IMAPClientSessionTest):
    def setUp(self):
        super().setUp()
        self.select()

    def test_counts_come_from_select(self):
        self.assertEqual(self.session.message_count(), 3)
        self.assertEqual(self.session.recent_count(), 1)
        self.client.folder_status.assert_not_called()

    def test_counts_follow_untagged_replies(self):
        self.client.noop.return_value = (
            b"NOOP completed",
            [(5, b"EXISTS"), (2, b"RECENT")],
        )
        self.session.current_status()

        self.assertEqual(self.session.message_count(), 5)
        self.assertEqual(self.session.recent_count(), 2)
        self.client.folder_status.assert_not_called()

    def test_expunge_replies_lower_count(self):
        self.client.noop.return_value = (b"NOOP completed", [(2, b"EXPUNGE")])
        self.session.current_status()
        self.assertEqual(self.session.message_count(), 2)

        self.client.expunge.return_value = (
            b"EXPUNGE completed",
            [(1, b"EXPUNGE"), (1, b"EXPUNGE")],
        )
        self.session.expunge()
        self.assertEqual(self.session.message_count(), 0)

    def test_reselect_resets_counts(self):
        self.client.select_folder.return_value = {b"EXISTS": 8, b"RECENT": 0}
        self.select("INBOX.Sent")
        self.assertEqual(self.session.message_count(), 8)
        self.assertEqual(self.session.recent_count(), 0)

    def test_mailbox_info(self):
        self.client.select_folder.return_value = {
            b"EXISTS": 10,
            b"RECENT": 2,
            b"UIDNEXT": 11,
            b"UIDVALIDITY": 1239278212,
        }
        self.select()
        self.assertEqual(
            self.session.mailbox_info(),
            {
                "mailbox": "INBOX",
                "messages": 10,
                "exists": 10,
                "recent": 2,
                "uidnext": 11,
                "uidvalidity": 1239278212,
            },
        )
        self.client.folder_status.assert_not_called()

    def test_counts_need_selection(self):
        session = IMAPClientSession(self.client)
        self.assertRaises(SessionError, session.message_count)
        self.assertRaises(SessionError, session.search_uids, "ALL")
        self.assertRaises(SessionError, session.expunge)

    def test_search_uses_uids(self):
        self.client.use_uid = False
        modes = []

        def search(query, charset=None):
            modes.append(self.client.use_uid)
            return [5, 7]

        self.client.search.side_effect = search

        self.assertEqual(self.session.search_uids("UNSEEN"), [5, 7])
        self.client.search.assert_called_once_with("UNSEEN", charset=None)
        self.assertEqual(modes, [True])
        self.assertFalse(self.client.use_uid)

    def test_search_non_ascii_text(self):
        def search(query, charset=None):
            # IMAPClient sends string criteria in the given charset
            query.encode(charset or "us-ascii")
            return [3]

        self.client.search.side_effect = search
        query = str(SearchExpression(Subject("Caf\xe9")))

        self.assertEqual(self.session.search_uids(query), [3])
        self.client.search.assert_called_once_with(
            'SUBJECT "Caf\xe9"', charset="UTF-8"
        )

    def test_search_encoding_error(self):
        def search(query, charset=None):
            query.encode("us-ascii")

        self.client.search.side_effect = search
        self.assertRaises(SessionError, self.session.search_uids, "SUBJECT \"Caf\xe9\"")

    def test_search_failure(self):
        self.client.search.side_effect = IMAPClientError("BAD")
        self.assertRaises(SessionError, self.session.search_uids, "BOGUS")

    def test_fetch_overview(self):
        when = datetime(2024, 1, 15, 10, 30)
        self.client.fetch.return_value = {
            9: {b"SEQ": 2, b"FLAGS": (b"\\Seen",), b"RFC822.SIZE": 100},
            4: {b"SEQ": 1, b"FLAGS": (), b"INTERNALDATE": when},
        }

        records = self.session.fetch_overview("1:*")

        self.client.fetch.assert_called_once_with(
            "1:*", [b"FLAGS", b"RFC822.SIZE", b"INTERNALDATE"]
        )
        self.assertEqual([r["uid"] for r in records], [4, 9])
        self.assertEqual(records[0]["date"], when)
        self.assertEqual(records[1]["flags"], (b"\\Seen",))
        self.assertEqual(records[1]["size"], 100)

    def test_fetch_message_by_number(self):
        modes = []

        def fetch(messages, data):
            modes.append(self.client.use_uid)
            return {3: {b"RFC822": b"raw", b"SEQ": 3}}

        self.client.fetch.side_effect = fetch

        self.assertEqual(self.session.fetch_message(3, uid=False), b"raw")
        self.client.fetch.assert_called_once_with([3], [b"RFC822"])
        self.assertEqual(modes, [False])
        self.assertTrue(self.client.use_uid)

    def test_fetch_missing_message(self):
        self.client.fetch.return_value = {}
        self.assertRaises(SessionError, self.session.fetch_message, 3)

    def test_expunge(self):
        self.session.expunge()
        self.client.expunge.assert_called_once_with()


class TestClose(IMAPClientSessionTest):
    def test_close(self):
        self.assertTrue(self.session.close())
        self.client.logout.assert_called_once_with()
        self.assertFalse(self.client.close_folder.called)
        self.assertTrue(self.session.closed)

    def test_close_expunge(self):
        self.select()
        self.session.close(CL_EXPUNGE)
        self.assertEqual(
            self.client.method_calls[-2:], [call.close_folder(), call.logout()]
        )

    def test_close_twice(self):
        self.session.close()
        self.assertFalse(self.session.close())
        self.client.logout.assert_called_once_with()

    def test_unclean_close(self):
        self.client.logout.side_effect = IMAPClientError("no BYE")
        self.assertFalse(self.session.close())
        self.client.shutdown.assert_called_once_with()
        self.assertTrue(self.session.closed)


class TestWithConnection(IMAPClientSessionTest):
    def test_prefixed_listing(self):
        self.client.list_folders.return_value = [
            ((), b".", b"INBOX.Sent"),
            ((), b".", b"INBOX.Entw&APw-rfe"),
        ]
        conn = Connection(self.session, "INBOX.")

        self.assertEqual(conn.list_mailbox_names(), ["Sent", "Entw\xfcrfe"])
        self.client.list_folders.assert_called_once_with("INBOX.", "*")

    def test_mailbox_count_selects_once(self):
        self.client.list_folders.return_value = [((), b".", b"INBOX.Sent")]
        conn = Connection(self.session, "INBOX.")
        sent = conn.get_mailbox("Sent")

        self.assertEqual(sent.count(), 3)
        self.assertEqual(sent.count(), 3)

        self.client.select_folder.assert_called_once_with("INBOX.Sent")
        self.client.folder_status.assert_not_called()

    def test_closed_session_rejected(self):
        self.session.close()
        self.assertRaises(InvalidSessionHandle, Connection, self.session)

    def test_client_property(self):
        self.assertIs(IMAPClientSession(sentinel.client).client, sentinel.client)
