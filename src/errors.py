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
nntpclient.errors - Exceptions raised by the NNTP client
"""

from enum import Enum
from typing import Optional


class NNTPError(Exception):
    """Base class for all NNTP errors"""


class NNTPStatusError(NNTPError):
    """The server answered with a status code the command did not expect.

    The wire format was fine, so the connection can still be used.
    """

    def __init__(self, code: int, message: str):
        self.code = code
        self.message = message
        super().__init__(code, message)

    def __str__(self) -> str:
        return "%03d %s" % (self.code, self.message)


class ProtocolErrorKind(Enum):
    SHORT_RESPONSE = "short response"
    INVALID_CODE = "invalid response code"
    MALFORMED_HEADER = "malformed header line"
    UNEXPECTED_EOF = "unexpected end of data"
    BAD_RECORD = "bad record"
    BAD_ARGUMENTS = "bad arguments"


class NNTPProtocolError(NNTPError):
    """The server sent something that is not valid NNTP"""

    def __init__(self, kind: ProtocolErrorKind, line: Optional[str] = None, detail: Optional[str] = None):
        self.kind = kind
        self.line = line
        self.detail = detail
        super().__init__(kind, line)

    def __str__(self) -> str:
        msg = self.detail or self.kind.value
        if self.line is not None:
            return "%s: %s" % (msg, self.line)
        return msg


class NNTPTransportError(NNTPError, ConnectionError):
    """The connection is gone, either closed by us or dropped by the server"""
