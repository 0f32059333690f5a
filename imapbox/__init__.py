# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

from .connection import *  # noqa: F401,F403
from .exceptions import *  # noqa: F401,F403
from .imapclient_session import IMAPClientSession  # noqa: F401
from .mailbox import *  # noqa: F401,F403
from .message import *  # noqa: F401,F403
from .session import *  # noqa: F401,F403
from .version import author as __author__  # noqa: F401
from .version import version as __version__  # noqa: F401
from .version import version_info  # noqa: F401
