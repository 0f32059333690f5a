# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses


# Base class allowing to catch any imapbox related exceptions
class ImapBoxError(RuntimeError):
    pass


class InvalidSessionHandle(ImapBoxError):
    """
    The handle given to a Connection is not a live Session.
    """


class SessionError(ImapBoxError):
    """
    A command issued against the session failed, for example because
    no mailbox is selected or the server refused the command.
    """


class MailboxNotFound(ImapBoxError):
    """The requested mailbox is not in the server's mailbox list."""

    def __init__(self, name):
        super().__init__("Mailbox '%s' does not exist" % name)
        self.name = name


class MailboxCreateFailed(ImapBoxError):
    def __init__(self, name, namespace_prefix):
        super().__init__(
            "Can not create '%s' mailbox at '%s'" % (name, namespace_prefix)
        )
        self.name = name
        self.namespace_prefix = namespace_prefix


class MailboxDeleteFailed(ImapBoxError):
    def __init__(self, mailbox_name):
        super().__init__("Mailbox '%s' could not be deleted" % mailbox_name)
        self.mailbox_name = mailbox_name
