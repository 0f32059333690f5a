# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

from typing import Tuple

version_info = (0, 3, 0, "final")


def _imapbox_version_string(vinfo: Tuple[int, int, int, str]) -> str:
    major, minor, micro, releaselevel = vinfo
    v = "%d.%d.%d" % (major, minor, micro)
    if releaselevel != "final":
        v += "-" + releaselevel
    return v


version = _imapbox_version_string(version_info)

maintainer = "imapbox Maintainers"
maintainer_email = "maintainers@imapbox.invalid"

author = "imapbox contributors"
author_email = "maintainers@imapbox.invalid"
