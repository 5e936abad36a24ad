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
nntpclient.records - Decoders for the listings returned by multi-line replies
"""

import re
from datetime import datetime
from typing import Iterable, List, NamedTuple, Optional

from nntpclient.errors import NNTPProtocolError, ProtocolErrorKind
from nntpclient.timefmt import parse_article_date

INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class Group(NamedTuple):
    """A single newsgroup as listed by LIST ACTIVE or NEWGROUPS"""

    name: str
    high: int
    """Highest message number"""
    low: int
    """Lowest message number"""
    status: str
    """Posting status, typically "y", "n" or "m" """


class MessageOverview(NamedTuple):
    """One line of an OVER reply"""

    number: int
    """Message number in the group"""
    subject: str
    from_: str
    date: Optional[datetime]
    """None if the Date header is missing or could not be parsed"""
    message_id: str
    references: List[str]
    bytes: int
    """The :bytes metadata item of RFC 3977"""
    lines: int
    """The :lines metadata item of RFC 3977"""
    extra: List[str]
    """Any additional fields returned by the server"""


def _bad_record(detail: str, line: str) -> NNTPProtocolError:
    return NNTPProtocolError(ProtocolErrorKind.BAD_RECORD, line, detail)


def parse_groups(lines: Iterable[str]) -> List[Group]:
    groups = []
    for line in lines:
        fields = line.strip().split(" ", 3)
        if len(fields) < 4:
            raise _bad_record("short group info line", line)
        try:
            high = wire_int(fields[1])
            low = wire_int(fields[2])
        except ValueError:
            raise _bad_record("bad number in line", line)
        groups.append(Group(fields[0], high, low, fields[3]))
    return groups


def wire_int(value: str) -> int:
    """Like int(), but without the underscores and whitespace Python allows"""
    if not INTEGER_RE.fullmatch(value):
        raise ValueError("invalid integer: %r" % value)
    return int(value)


def _to_int(value: str, what: str, line: str) -> int:
    try:
        return wire_int(value)
    except ValueError:
        raise _bad_record("bad %s '%s' in line" % (what, value), line)


def parse_overview(lines: Iterable[str]) -> List[MessageOverview]:
    """Decode OVER lines. The fields are tab separated, an unparseable
    date is not fatal since the Date header itself may be broken.
    """
    result = []
    for line in lines:
        fields = line.strip().split("\t", 8)
        if len(fields) < 8:
            raise _bad_record("short header listing line (%d fields)" % len(fields), line)

        number = _to_int(fields[0], "message number", line)
        date = parse_article_date(fields[3])
        # Message-Id's contain no spaces, so this is safe
        references = fields[5].split(" ") if fields[5] else []
        size = _to_int(fields[6], "byte count", line)
        line_count = _to_int(fields[7], "line count", line)

        result.append(
            MessageOverview(
                number=number,
                subject=fields[1],
                from_=fields[2],
                date=date,
                message_id=fields[4],
                references=references,
                bytes=size,
                lines=line_count,
                extra=fields[8:],
            )
        )
    return result


def unique_sorted(ids: Iterable[str]) -> List[str]:
    """Sort and drop duplicates, keeping the first of every run"""
    result = []
    for message_id in sorted(ids):
        if not result or result[-1] != message_id:
            result.append(message_id)
    return result


class GroupStatus(NamedTuple):
    """Reply to GROUP"""

    number: int
    """Estimated number of articles in the group"""
    low: int
    high: int


class ArticlePointer(NamedTuple):
    """Reply to STAT, NEXT and LAST"""

    number: str
    """Message number in the current group, "0" if the article
    was not posted to it"""
    message_id: str
