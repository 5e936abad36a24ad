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
nntpclient.dotstuff - Reading and writing dot-stuffed multi-line blocks
"""

import io
from typing import Callable, Iterable, Iterator, List, Union

from nntpclient.errors import NNTPProtocolError, ProtocolErrorKind

DOT = b"."
DOTDOT = b".."
DOTNL = b".\n"
CRLF = b"\r\n"
LF = b"\n"


class BodyReader(io.RawIOBase):
    """Reads a multi-line block from the server until it finds a line
    containing just a dot.

    Lines are pulled from `readline` one at a time and only when the caller
    asks for more data. Line endings come out as a bare LF and the
    dot-stuffing is undone. The reader is valid until the next command is
    sent on the connection it came from; after that it is closed.
    """

    def __init__(self, readline: Callable[[], bytes]):
        super().__init__()
        self._readline = readline
        self._buf = b""
        self._eof = False

    @property
    def exhausted(self) -> bool:
        """True once the terminating dot line has been read"""
        return self._eof

    def readable(self) -> bool:
        return True

    def _fill(self) -> bool:
        """Load the next line into the buffer, returns False at the end of the block"""
        if self._buf:
            return True
        if self._eof:
            return False

        line = self._readline()
        if not line:
            raise NNTPProtocolError(ProtocolErrorKind.UNEXPECTED_EOF, detail="multi-line block ended without a dot line")

        # Canonicalize newlines
        if line.endswith(CRLF):
            line = line[:-2] + LF

        if line == DOTNL:
            self._eof = True
            return False

        # Undo the dot-stuffing
        if line.startswith(DOTDOT):
            line = line[1:]

        self._buf = line
        return True

    def _take(self, size: int) -> bytes:
        if size < 0 or size >= len(self._buf):
            data, self._buf = self._buf, b""
        else:
            data, self._buf = self._buf[:size], self._buf[size:]
        return data

    def readinto(self, b) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed body reader")
        if not self._fill():
            return 0
        data = self._take(len(b))
        n = len(data)
        b[:n] = data
        return n

    def readline(self, size: int = -1) -> bytes:
        # The buffer never holds more than one line
        if self.closed:
            raise ValueError("I/O operation on closed body reader")
        if size == 0 or not self._fill():
            return b""
        return self._take(size)

    def discard(self) -> None:
        """Read and drop whatever is left of the block.
        Works on a reader the caller already closed, so the connection can
        always get back in sync.
        """
        self._buf = b""
        while self._fill():
            self._buf = b""


def read_lines(readline: Callable[[], bytes]) -> List[bytes]:
    """Read a complete multi-line block, returning its lines without line endings"""
    lines = []
    for line in BodyReader(readline):
        if line.endswith(LF):
            line = line[:-1]
        lines.append(line)
    return lines


def dot_stuff_lines(lines: Iterable[Union[bytes, str]]) -> Iterator[bytes]:
    """Turn lines of text into wire lines: any line ending becomes CRLF and
    lines starting with a dot get an extra one. A last line without a
    line ending is still sent.
    """
    for line in lines:
        if isinstance(line, str):
            line = line.encode("utf-8", "surrogateescape")
        if line.endswith(CRLF):
            line = line[:-2]
        elif line.endswith(LF):
            line = line[:-1]
        if line.startswith(DOT):
            line = DOT + line
        yield line + CRLF
