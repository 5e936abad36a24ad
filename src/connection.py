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
nntpclient.connection - The NNTP protocol engine

A Connection is stateful: the server keeps track of the selected group
and the current article within it. Methods that name an article take
either a message-id, which is global, or a message number, which is
local to the selected group. An empty id means the current article.

Any BodyReader returned (directly or as the body of an Article) is only
valid until the next method call on the Connection. Whatever was not
read of it by then is skipped.
"""

import io
import logging
import socket
import ssl
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Union

from nntpclient.article import Article
from nntpclient.dotstuff import BodyReader, dot_stuff_lines, read_lines
from nntpclient.errors import NNTPProtocolError, NNTPTransportError, ProtocolErrorKind
from nntpclient.headers import decode_text, read_header
from nntpclient.records import (
    ArticlePointer,
    Group,
    GroupStatus,
    MessageOverview,
    parse_groups,
    parse_overview,
    unique_sorted,
    wire_int,
)
from nntpclient.status import StatusReply, check_status, parse_status_line
from nntpclient.timefmt import format_new, parse_date_reply

logger = logging.getLogger(__name__)

NNTP_PORT = 119
NNTPS_PORT = 563


class ConnectionState(Enum):
    READY = "ready"
    AWAITING_STATUS = "awaiting status"
    BODY_PENDING = "body pending"
    CLOSED = "closed"


def dial(host: str, port: int = NNTP_PORT, timeout: Optional[float] = None) -> "Connection":
    """Connect to an NNTP server over plain TCP"""
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        logger.error("Failed to connect to %s:%s: %s", host, port, e)
        raise
    return Connection(sock)


def dial_tls(
    host: str,
    port: int = NNTPS_PORT,
    context: Optional[ssl.SSLContext] = None,
    timeout: Optional[float] = None,
) -> "Connection":
    """Connect to an NNTP server with TLS from the start"""
    if context is None:
        context = ssl.create_default_context()
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        logger.error("Failed to connect to %s:%s: %s", host, port, e)
        raise
    try:
        sock = context.wrap_socket(sock, server_hostname=host)
    except OSError as e:
        logger.error("TLS handshake with %s:%s failed: %s", host, port, e)
        sock.close()
        raise
    return Connection(sock)


def _maybe_id(cmd: str, message_id: Union[str, int]) -> str:
    message_id = str(message_id)
    if message_id:
        return "%s %s" % (cmd, message_id)
    return cmd


class Connection:
    """A connection to an NNTP server.

    `sock` is anything with makefile(), sendall() and close(), usually a
    connected socket.socket or ssl.SSLSocket. The server greeting is read
    right away.
    """

    def __init__(self, sock):
        self._sock = sock
        self._file = sock.makefile("rb")
        self._body: Optional[BodyReader] = None
        self._closed = False
        self._state = ConnectionState.AWAITING_STATUS

        try:
            self.greeting = self._read_status(2)
        except Exception:
            self._close()
            raise
        self.posting_allowed = self.greeting.code == 200
        logger.info("Connected to server: %s", self.greeting.text)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        if not self._closed:
            try:
                self.quit()
            except OSError:
                # Already broken, nothing left to say goodbye to
                pass

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> ConnectionState:
        if self._closed:
            return ConnectionState.CLOSED
        if self._body is not None and not self._body.exhausted:
            return ConnectionState.BODY_PENDING
        return self._state

    def _close(self):
        self._closed = True
        self._body = None
        try:
            self._file.close()
        except OSError:
            pass
        try:
            self._sock.close()
        except OSError:
            pass

    def _abort(self, reason):
        logger.warning("Connection to server lost: %s", reason)
        self._close()

    def _readline(self) -> bytes:
        try:
            line = self._file.readline()
        except OSError as e:
            self._abort(e)
            raise
        if not line:
            self._abort("end of data")
            raise NNTPTransportError("connection closed by server")
        return line

    def _send(self, data: bytes):
        try:
            self._sock.sendall(data)
        except OSError as e:
            self._abort(e)
            raise

    def _release_body(self):
        """Skip what is left of the previous body and invalidate its reader"""
        body, self._body = self._body, None
        if body is not None:
            try:
                body.discard()
            finally:
                body.close()

    def _open_body(self) -> BodyReader:
        self._body = BodyReader(self._readline)
        return self._body

    def _read_status(self, expect_code: int) -> StatusReply:
        self._state = ConnectionState.AWAITING_STATUS
        line = decode_text(self._readline())
        self._state = ConnectionState.READY
        logger.debug("<< %s", line.rstrip())
        return check_status(expect_code, parse_status_line(line))

    def _read_lines(self) -> List[str]:
        return [decode_text(line) for line in read_lines(self._readline)]

    def command(self, expect_code: int, line: str, multiline: bool = False) -> StatusReply:
        """Send a command and read the status line of the reply.

        expect_code is matched against the reply code by as many digits
        as it has: 2 accepts any 2xx, 21 any 21x and 211 only 211. An
        expect_code of 0 accepts anything. A mismatch raises NNTPStatusError.

        With multiline set, a dot-terminated block follows an accepted
        reply. It is available from pending_body until the next command.
        """
        if self._closed:
            raise NNTPTransportError("connection closed")
        self._release_body()

        if line.startswith("AUTHINFO PASS"):
            logger.debug(">> AUTHINFO PASS ****")
        else:
            logger.debug(">> %s", line)
        self._send(line.encode("utf-8", "surrogateescape") + b"\r\n")
        reply = self._read_status(expect_code)
        if multiline:
            self._open_body()
        return reply

    @property
    def pending_body(self) -> Optional[BodyReader]:
        """The reader for the block following the last reply, if any"""
        return self._body

    def authenticate(self, username: str, password: str):
        """Log in, the password is only sent if the server asks for it"""
        reply = self.command(0, "AUTHINFO USER %s" % username)
        if reply.code // 100 == 3:
            self.command(2, "AUTHINFO PASS %s" % password)
        else:
            check_status(2, reply)

    def mode_reader(self):
        """Switch a mode-switching server to reader mode"""
        self.command(20, "MODE READER")

    def new_groups(self, since: datetime) -> List[Group]:
        """Groups created since the given time"""
        self.command(231, "NEWGROUPS %s" % format_new(since))
        return parse_groups(self._read_lines())

    def new_news(self, group: str, since: datetime) -> List[str]:
        """Sorted message-ids of the articles posted to group since the given time"""
        self.command(230, "NEWNEWS %s %s" % (group, format_new(since)))
        return unique_sorted(self._read_lines())

    def overview(self, begin: int, end: int) -> List[MessageOverview]:
        """Overviews of the messages in the current group numbered begin to end, inclusive"""
        self.command(224, "OVER %d-%d" % (begin, end))
        return parse_overview(self._read_lines())

    def capabilities(self) -> List[str]:
        self.command(101, "CAPABILITIES")
        return self._read_lines()

    def date(self) -> datetime:
        """Current time on the server, typically passed to new_groups or new_news later"""
        reply = self.command(111, "DATE")
        try:
            return parse_date_reply(reply.text)
        except ValueError:
            raise NNTPProtocolError(ProtocolErrorKind.BAD_RECORD, reply.text, "invalid time")

    def list(self, *args: str) -> List[str]:
        """List groups on the server. Valid forms are:

            list() - active groups
            list(keyword) - different kinds of information about groups
            list(keyword, pattern) - filtered against a wildmat pattern
        """
        if len(args) > 2:
            raise NNTPProtocolError(ProtocolErrorKind.BAD_ARGUMENTS, detail="list only takes up to 2 arguments")
        self.command(215, " ".join(("LIST",) + args))
        return self._read_lines()

    def group(self, name: str) -> GroupStatus:
        """Select a group, returns the article count and the low and high numbers"""
        reply = self.command(211, "GROUP %s" % name)

        # Anything after the third number is a comment
        fields = reply.text.split(" ", 3)
        if len(fields) < 3:
            raise NNTPProtocolError(ProtocolErrorKind.BAD_RECORD, reply.text, "bad group response")
        try:
            return GroupStatus(*(wire_int(field) for field in fields[:3]))
        except ValueError:
            raise NNTPProtocolError(ProtocolErrorKind.BAD_RECORD, reply.text, "bad group response")

    def help(self) -> BodyReader:
        self.command(100, "HELP", multiline=True)
        return self._body

    def _next_last_stat(self, cmd: str, message_id: Union[str, int] = "") -> ArticlePointer:
        reply = self.command(223, _maybe_id(cmd, message_id))
        fields = reply.text.split(" ", 2)
        if len(fields) < 2:
            raise NNTPProtocolError(ProtocolErrorKind.BAD_RECORD, reply.text, "bad response to %s" % cmd)
        return ArticlePointer(fields[0], fields[1])

    def stat(self, message_id: Union[str, int]) -> ArticlePointer:
        """Look up an article by message-id or number. The number returned
        is "0" when the article was not posted to the current group.
        """
        return self._next_last_stat("STAT", message_id)

    def last(self) -> ArticlePointer:
        """Select the previous article"""
        return self._next_last_stat("LAST")

    def next(self) -> ArticlePointer:
        """Select the next article"""
        return self._next_last_stat("NEXT")

    def article_text(self, message_id: Union[str, int] = "") -> BodyReader:
        """The whole article in plain text form, not wire format"""
        self.command(220, _maybe_id("ARTICLE", message_id), multiline=True)
        return self._body

    def article(self, message_id: Union[str, int] = "") -> Article:
        self.command(220, _maybe_id("ARTICLE", message_id), multiline=True)
        body = self._body
        headers = read_header(body)
        return Article(headers, body)

    def head_text(self, message_id: Union[str, int] = "") -> BodyReader:
        self.command(221, _maybe_id("HEAD", message_id), multiline=True)
        return self._body

    def head(self, message_id: Union[str, int] = "") -> Article:
        """The headers of an article, the body of the result is None"""
        self.command(221, _maybe_id("HEAD", message_id), multiline=True)
        headers = read_header(self._body)
        self._release_body()
        return Article(headers)

    def body(self, message_id: Union[str, int] = "") -> BodyReader:
        self.command(222, _maybe_id("BODY", message_id), multiline=True)
        return self._body

    def raw_post(self, lines: Iterable[Union[bytes, str]]):
        """Post an article given in text form, as a file object or any
        other iterable of lines.

        If reading the lines fails halfway, the server is left inside the
        article, so the connection is closed before the error propagates.
        """
        if self._body is not None and lines is self._body:
            # POST releases the body, it has to be read first
            lines = self._body.readlines()
        self.command(3, "POST")
        try:
            for line in dot_stuff_lines(lines):
                self._send(line)
        except BaseException as e:
            self._abort("post interrupted: %r" % e)
            raise
        self.command(240, ".")

    def post(self, article: Article):
        if self._body is not None and article.body is self._body:
            article.body = io.BytesIO(self._body.read())
        elif isinstance(article.body, io.IOBase) and article.body.closed:
            raise ValueError("article body is closed")
        self.raw_post(article.iter_lines())

    def quit(self):
        """Send QUIT and close the connection"""
        try:
            self.command(0, "QUIT")
        finally:
            logger.info("Closing connection")
            self._close()
