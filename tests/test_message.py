# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

import unittest
from unittest.mock import Mock, sentinel

from imapbox.message import Message, MessageIterator


class TestMessageIterator(unittest.TestCase):
    def setUp(self):
        self.session = Mock()
        self.messages = MessageIterator(self.session, [9, 3, 5])

    def test_order_preserved(self):
        self.assertEqual([m.number for m in self.messages], [9, 3, 5])

    def test_restartable(self):
        self.assertEqual(list(self.messages), list(self.messages))

    def test_lazy(self):
        list(self.messages)
        self.assertEqual(self.session.method_calls, [])

    def test_items_are_uid_messages(self):
        self.assertEqual(self.messages[0], Message(self.session, 9, uid=True))
        self.assertEqual(len(self.messages), 3)

    def test_slice(self):
        sliced = self.messages[1:]
        self.assertIsInstance(sliced, MessageIterator)
        self.assertEqual(sliced.identifiers, (3, 5))

    def test_empty(self):
        self.assertEqual(list(MessageIterator(self.session, [])), [])


class TestMessage(unittest.TestCase):
    def test_raw(self):
        session = Mock()
        session.fetch_message.return_value = sentinel.raw
        self.assertIs(Message(session, 4).raw(), sentinel.raw)
        session.fetch_message.assert_called_once_with(4, uid=False)

    def test_repr(self):
        self.assertEqual(repr(Message(None, 4, uid=True)), "<Message uid=4>")
        self.assertEqual(repr(Message(None, 4)), "<Message number=4>")
