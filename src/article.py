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
nntpclient.article - In-memory representation of a news article
"""

import io
from typing import IO, Iterator, Optional, Union

from nntpclient.headers import HeaderDict


class Article:
    """An article: headers plus an optional body stream.

    When the article was read from a connection the body is a BodyReader
    that is only valid until the next command on that connection.
    """

    def __init__(self, headers: Optional[HeaderDict] = None, body: Union[IO[bytes], bytes, str, None] = None):
        if headers is None:
            headers = HeaderDict()
        elif not isinstance(headers, HeaderDict):
            headers = HeaderDict(headers)
        if isinstance(body, str):
            body = body.encode("utf-8")
        if isinstance(body, (bytes, bytearray)):
            body = io.BytesIO(body)
        self.headers = headers
        self.body = body

    @property
    def message_id(self) -> Optional[str]:
        return self.headers.get_first("Message-Id")

    def iter_lines(self) -> Iterator[bytes]:
        """The article in text form, one line at a time: every header value
        on its own line, a blank line if there is a body and then the body.
        The body is consumed in the process.
        """
        for key, values in self.headers.items():
            for value in values:
                yield ("%s: %s\n" % (key, value)).encode("utf-8", "surrogateescape")
        if self.body is not None:
            yield b"\n"
            yield from self.body
            self.body = None

    def write_to(self, fp: IO[bytes]) -> int:
        """Write the article in text form to fp, returns the number of bytes written"""
        written = 0
        for line in self.iter_lines():
            fp.write(line)
            written += len(line)
        return written

    def __str__(self) -> str:
        message_id = self.message_id
        if message_id is None:
            return "[NNTP article]"
        return "[NNTP article %s]" % message_id

    def __repr__(self) -> str:
        return "<Article %s>" % self.message_id
