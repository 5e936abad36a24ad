# Copyright 2007-2024 The SABnzbd-Team (sabnzbd.org)
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License
# as published by the Free Software Foundation; either version 2
# of the License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301, USA.

"""
nntpclient.headers - RFC822-style article headers
"""

from collections.abc import MutableMapping
from typing import Dict, Iterator, List, Optional, Union

import chardet

from nntpclient.errors import NNTPProtocolError, ProtocolErrorKind

WHITESPACE = b" \t"
LINE_END_WHITESPACE = b" \t\r\n"


def decode_text(data: bytes) -> str:
    """Headers are supposed to be ASCII but old posting software
    happily sends 8-bit data. Try UTF-8 first, then let chardet guess,
    and use ISO-8859-1 as last resort since it accepts any byte.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        pass

    encoding = chardet.detect(data)["encoding"]
    if encoding:
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            pass
    return data.decode("ISO-8859-1")


def canonical_key(name: str) -> str:
    """Canonical form of a header name: "message-ID" becomes "Message-Id" """
    return "-".join(part[:1].upper() + part[1:].lower() for part in name.split("-"))


class HeaderDict(MutableMapping):
    """Case-insensitive mapping from header name to the list of its values.

    Keys are kept in the order they first appeared. A header that occurs
    more than once keeps every value as a separate list entry; nothing is
    ever joined with commas.
    """

    def __init__(self, *args, **kwargs):
        self._data: Dict[str, List[str]] = {}
        self.update(*args, **kwargs)

    def __getitem__(self, key: str) -> List[str]:
        return self._data[canonical_key(key)]

    def __setitem__(self, key: str, values: Union[str, List[str]]):
        if isinstance(values, str):
            values = [values]
        self._data[canonical_key(key)] = list(values)

    def __delitem__(self, key: str):
        del self._data[canonical_key(key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key) -> bool:
        return isinstance(key, str) and canonical_key(key) in self._data

    def __repr__(self) -> str:
        return "HeaderDict(%r)" % self._data

    def add(self, key: str, value: str):
        """Append a value, keeping any earlier ones"""
        self._data.setdefault(canonical_key(key), []).append(value)

    def get_first(self, key: str, default: Optional[str] = None) -> Optional[str]:
        values = self._data.get(canonical_key(key))
        if values:
            return values[0]
        return default


def _read_line(reader) -> Optional[bytes]:
    """Next physical line, None at a clean end of data"""
    line = reader.readline()
    if not line:
        return None
    if not line.endswith(b"\n"):
        raise NNTPProtocolError(ProtocolErrorKind.UNEXPECTED_EOF, decode_text(line))
    return line


def _split_field(line: bytes):
    i = line.find(b":")
    if i <= 0:
        raise NNTPProtocolError(ProtocolErrorKind.MALFORMED_HEADER, decode_text(line))

    key = line[:i]
    if any(c in WHITESPACE for c in key):
        # Key field has space - no good
        raise NNTPProtocolError(ProtocolErrorKind.MALFORMED_HEADER, decode_text(line))

    return decode_text(key), decode_text(line[i + 1 :].lstrip(WHITESPACE))


def read_header(reader) -> HeaderDict:
    """Parse a header block from `reader`, anything with a readline()
    returning bytes. Stops after the blank line that ends the block,
    or at the end of the data when there is no body (HEAD).

    Continuation lines, which start with a space or tab, are added to
    the value of the field before them with a single space.
    """
    headers = HeaderDict()
    line = _read_line(reader)
    while line is not None:
        line = line.rstrip(LINE_END_WHITESPACE)
        if not line:
            break
        key, value = _split_field(line)

        # Look for extension lines, which must begin with space
        while True:
            line = _read_line(reader)
            if line is None or line[:1] not in (b" ", b"\t"):
                break
            value += " " + decode_text(line.strip(LINE_END_WHITESPACE))

        # RFC 3977 says nothing about duplicate keys being equivalent to
        # a single key joined with commas, so we keep all values separate
        headers.add(key, value)
    return headers
