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
nntpclient.status - Parsing of NNTP status lines
"""

from typing import NamedTuple

from nntpclient.errors import NNTPProtocolError, NNTPStatusError, ProtocolErrorKind

# "DDD " is the shortest valid status line
MIN_STATUS_LENGTH = 4


class StatusReply(NamedTuple):
    code: int
    """Code extracted from the first 3 characters of the response"""
    text: str
    """Everything after the code and the separating space"""


def parse_status_line(line: str) -> StatusReply:
    """Split a status line of the form "DDD text" into code and text.
    Surrounding whitespace (including the line ending) is ignored.
    """
    line = line.strip()
    if len(line) < MIN_STATUS_LENGTH or line[3] != " ":
        raise NNTPProtocolError(ProtocolErrorKind.SHORT_RESPONSE, line)

    digits = line[:3]
    if not (digits.isascii() and digits.isdigit()):
        raise NNTPProtocolError(ProtocolErrorKind.INVALID_CODE, line)

    return StatusReply(int(digits), line[4:])


def code_matches(expect_code: int, code: int) -> bool:
    """Check a status code against what the caller expects.

    The number of digits in expect_code decides how much is compared:
    1-9 only checks the first digit, 10-99 the first two and 100-999
    the whole code. An expect_code of 0 accepts everything.
    """
    if 1 <= expect_code < 10:
        return code // 100 == expect_code
    if 10 <= expect_code < 100:
        return code // 10 == expect_code
    if 100 <= expect_code < 1000:
        return code == expect_code
    return True


def check_status(expect_code: int, reply: StatusReply) -> StatusReply:
    if not code_matches(expect_code, reply.code):
        raise NNTPStatusError(reply.code, reply.text)
    return reply
