#!/usr/bin/python

# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

import argparse
import logging
from getpass import getpass
from typing import List, Optional

from .config import create_connection_from_config, get_config_defaults, parse_config_file
from .connection import Connection
from .exceptions import ImapBoxError


def command_line(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="List the mailboxes of an IMAP account with their message counts"
    )
    parser.add_argument(
        "-H", "--host", dest="host", action="store", help="IMAP host connect to"
    )
    parser.add_argument(
        "-u",
        "--username",
        dest="username",
        action="store",
        help="Username to login with",
    )
    parser.add_argument(
        "-p",
        "--password",
        dest="password",
        action="store",
        help="Password to login with",
    )
    parser.add_argument(
        "-P",
        "--port",
        dest="port",
        action="store",
        type=int,
        default=None,
        help="IMAP port to use (default is 993 for TLS, or 143 otherwise)",
    )
    parser.add_argument(
        "-n",
        "--namespace",
        dest="namespace",
        action="store",
        default=None,
        help="Namespace prefix of the mailboxes, e.g. INBOX.",
    )

    ssl_group = parser.add_mutually_exclusive_group()
    ssl_group.add_argument(
        "-s",
        "--ssl",
        dest="ssl",
        action="store_true",
        default=None,
        help="Use SSL/TLS connection (default)",
    )
    ssl_group.add_argument(
        "--insecure",
        dest="insecure",
        action="store_true",
        default=False,
        help="Use insecure connection (i.e. without SSL/TLS)",
    )

    parser.add_argument(
        "-f",
        "--file",
        dest="file",
        action="store",
        default=None,
        help="Config file",
    )
    parser.add_argument(
        "--debug",
        dest="debug",
        action="store_true",
        default=False,
        help="Log IMAP traffic and mailbox selection",
    )

    args = parser.parse_args(argv)
    debug = args.debug

    if args.file:
        if (
            args.host
            or args.username
            or args.password
            or args.port
            or args.ssl
            or args.insecure
            or args.namespace
        ):
            parser.error("If -f/--file is given no other options can be used")
        # Use the options in the config file
        args = parse_config_file(args.file)
        args.debug = debug
        return args

    args.ssl = not args.insecure

    # Scan through arguments, filling in defaults and prompting when
    # a compulsory argument wasn't provided.
    compulsory_args = ("host", "username", "password")
    for name, default_value in get_config_defaults().items():
        value = getattr(args, name, None)
        if value is None:
            value = default_value
        if name in compulsory_args and value is None:
            value = getpass(name + ": ")
        setattr(args, name, value)
    if args.host is None:
        args.host = input("host: ")

    return args


def print_mailboxes(conn: Connection) -> None:
    for mailbox in conn.list_mailboxes():
        try:
            count = str(mailbox.count())
        except ImapBoxError as e:
            count = "error: %s" % e
        print("%s\t%s" % (mailbox.name, count))


def main(argv: Optional[List[str]] = None) -> int:
    args = command_line(argv)
    if args.debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )
    print("Connecting...")
    with create_connection_from_config(args) as conn:
        print("Connected.")
        print_mailboxes(conn)
    return 0


if __name__ == "__main__":
    main()
