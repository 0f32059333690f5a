# List the mailboxes of an account, count the messages in Sent
# and file a copy of a message into an Archive mailbox

from imapclient import IMAPClient

from imapbox import Connection, IMAPClientSession
from imapbox.search import SearchExpression, Undeleted

HOST = "imap.host.com"
USERNAME = "someuser"
PASSWORD = "secret"

client = IMAPClient(HOST)
client.login(USERNAME, PASSWORD)

with Connection(IMAPClientSession(client), "INBOX.") as conn:
    for mailbox in conn.list_mailboxes():
        print(mailbox.name)

    sent = conn.get_mailbox("Sent")
    print("%d messages in Sent" % sent.count())

    messages = sent.get_messages(SearchExpression(Undeleted()))
    print("%d messages that aren't deleted" % len(messages))

    if conn.has_mailbox("Archive"):
        archive = conn.get_mailbox("Archive")
    else:
        archive = conn.create_mailbox("Archive")
    if len(messages):
        archive.add_message(messages[0].raw())
