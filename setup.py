#!/usr/bin/env python3

# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

from os import path
from typing import Dict

from setuptools import setup  # type: ignore[import-untyped]

# Read version info
here = path.dirname(__file__)
version_file = path.join(here, "imapbox", "version.py")
info: Dict[str, str] = {}
exec(open(version_file).read(), {}, info)

desc = """\
imapbox is a mailbox directory and selection layer on top of an
authenticated IMAP session.

Features:
    * Mailbox names are decoded from modified UTF-7, best effort.
    * Namespace prefixes are stripped and prepended consistently.
    * The mailbox list is cached and refreshed when mailboxes are
      created or deleted.
    * Mailboxes re-select themselves transparently on the shared
      session before every operation that needs it.
    * Ships with a session adapter for IMAPClient and an in-memory
      session for tests.

Python versions 3.7 and newer are supported.
"""

doc_deps = ["sphinx"]
test_deps = ["pytest"]

setup(
    name="imapbox",
    description="Mailbox directory and selection management for IMAP sessions",
    keywords="imap client email mail mailbox folder",
    version=info["version"],
    maintainer=info["maintainer"],
    maintainer_email=info["maintainer_email"],
    author=info["author"],
    author_email=info["author_email"],
    license="3-Clause BSD License",
    packages=["imapbox"],
    install_requires=["IMAPClient>=3.0.0"],
    extras_require={"doc": doc_deps, "test": test_deps},
    entry_points={"console_scripts": ["imapbox-interact = imapbox.interact:main"]},
    long_description=desc,
    python_requires=">=3.7.0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Natural Language :: English",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Communications :: Email :: Post-Office :: IMAP",
        "Topic :: Internet",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
