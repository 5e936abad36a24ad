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
nntpclient.timefmt - The NNTP date and time formats
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

# Argument format of NEWNEWS / NEWGROUPS, always followed by "GMT"
TIME_FORMAT_NEW = "%Y%m%d %H%M%S"
# Reply format of the DATE command
TIME_FORMAT_DATE = "%Y%m%d%H%M%S"


def _as_utc(when: datetime) -> datetime:
    # Naive values are taken as UTC already
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def format_new(since: datetime) -> str:
    return "%s GMT" % _as_utc(since).strftime(TIME_FORMAT_NEW)


def parse_date_reply(text: str) -> datetime:
    """Parse the reply of DATE, raises ValueError on anything but 14 digits"""
    text = text.strip()
    if len(text) != 14 or not text.isdigit():
        raise ValueError("invalid time: %s" % text)
    return datetime.strptime(text, TIME_FORMAT_DATE).replace(tzinfo=timezone.utc)


def parse_article_date(value: str) -> Optional[datetime]:
    """Parse a Date header value, None if it is missing or broken"""
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    return _as_utc(parsed)
