# Copyright (c) 2024, Menno Smits
# Released subject to the New BSD License
# Please see http://en.wikipedia.org/wiki/BSD_licenses

# Best-effort decoding of mailbox names as they come back from a LIST
# command. Names are transmitted in the modified UTF-7 of RFC 3501 section
# 5.1.3: & is the shift character instead of +, the base64 alphabet uses ,
# instead of / and there is no padding. Python's built-in UTF-7 codec only
# understands the standard form, so each shift sequence is rewritten to
# standard UTF-7 before being handed to it.
#
# Unlike a strict codec, decoding here never fails. A single malformed
# mailbox name must not abort a whole directory listing, so undecodable
# sequences are dropped and the result is flagged as lossy instead.

import dataclasses
from typing import List, Union

AMPERSAND_ORD = ord("&")
DASH_ORD = ord("-")
COMMA_ORD = ord(",")

# Display-level hierarchy separator substituted for commas outside of
# shift sequences.
SEPARATOR = "/"


@dataclasses.dataclass(frozen=True)
class DecodedName:
    """A decoded mailbox name.

    :ivar name: the decoded, unprefixed name
    :ivar lossy: ``True`` if some input could not be decoded and was dropped
    """

    name: str
    lossy: bool = False


def decode_mailbox_name(raw: Union[bytes, str], prefix: str = "") -> DecodedName:
    """Decode a raw mailbox name reported by the server.

    *prefix* (the namespace prefix) is stripped from the front of the
    name. Plain ASCII names are returned unchanged apart from the
    prefix and comma handling, so decoding is idempotent for them.
    Names which are not 7-bit (servers which have enabled UTF8=ACCEPT
    send raw UTF-8) are taken as already decoded.
    """
    text = _to_text(raw)
    if prefix and text.name.startswith(prefix):
        text = dataclasses.replace(text, name=text.name[len(prefix) :])

    if not text.name.isascii():
        return DecodedName(_map_separators(text.name), text.lossy)

    decoded = decode(text.name.encode("ascii"))
    return DecodedName(decoded.name, decoded.lossy or text.lossy)


def decode(s: bytes) -> DecodedName:
    """Decode 7-bit modified UTF-7 *s*, ignoring malformed sequences."""
    res: List[str] = []
    lossy = False
    # Store base64 substring that will be decoded once stepping on end shift character
    b64_buffer = bytearray()
    for c in s:
        # Shift character without anything in buffer -> starts storing base64 substring
        if c == AMPERSAND_ORD and not b64_buffer:
            b64_buffer.append(c)
        # End shift char. -> append the decoded buffer to the result and reset it
        elif c == DASH_ORD and b64_buffer:
            # Special case &-, representing "&" escaped
            if len(b64_buffer) == 1:
                res.append("&")
            else:
                chunk, failed = base64_utf7_decode(b64_buffer[1:])
                res.append(chunk)
                lossy = lossy or failed
            b64_buffer = bytearray()
        elif b64_buffer:
            b64_buffer.append(c)
        elif c == COMMA_ORD:
            res.append(SEPARATOR)
        else:
            res.append(chr(c))

    # Unterminated shift sequence at the end of the name
    if len(b64_buffer) == 1:
        res.append("&")
        lossy = True
    elif b64_buffer:
        chunk, failed = base64_utf7_decode(b64_buffer[1:])
        res.append(chunk)
        lossy = lossy or failed

    return DecodedName("".join(res), lossy)


def base64_utf7_decode(s: bytearray):
    """Decode the body of one shift sequence.

    Returns a ``(text, lossy)`` pair. The sequence is rewritten to
    standard UTF-7 (``+`` shift, ``/`` in the base64 alphabet) first.
    """
    s_utf7 = b"+" + bytes(s).replace(b",", b"/") + b"-"
    try:
        return s_utf7.decode("utf-7"), False
    except UnicodeDecodeError:
        return s_utf7.decode("utf-7", "ignore"), True


def _to_text(raw: Union[bytes, str]) -> DecodedName:
    if isinstance(raw, str):
        return DecodedName(raw)
    try:
        return DecodedName(raw.decode("ascii"))
    except UnicodeDecodeError:
        pass
    try:
        return DecodedName(raw.decode("utf-8"))
    except UnicodeDecodeError:
        return DecodedName(raw.decode("utf-8", "ignore"), lossy=True)


def _map_separators(name: str) -> str:
    return name.replace(",", SEPARATOR)
