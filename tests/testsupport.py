#!/usr/bin/python3 -OO
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

###################
# SUPPORT FUNCTIONS
###################
import contextlib
import io
import socket
import threading
from typing import Callable, List, Optional

import portend
import nntpclient

HOST = "127.0.0.1"


def wire(*lines: str) -> bytes:
    """Join lines with CRLF, as the server would send them"""
    return "".join("%s\r\n" % line for line in lines).encode("utf-8")


def multiline(status: str, *lines: str) -> bytes:
    """A status line followed by a dot-terminated block"""
    return wire(status, *lines, ".")


def line_source(data: bytes) -> Callable[[], bytes]:
    """A readline() over a fixed buffer, like the one a connection hands out"""
    return io.BytesIO(data).readline


class NNTPServer(threading.Thread):
    """Plays back one canned reply for every line it receives.

    After a 340 reply the following lines are the article being posted,
    they are collected in `posted` until the terminating dot, which gets
    the next reply. A reply of None leaves the line unanswered. The
    connection is dropped once the replies run out.
    """

    def __init__(self, replies: List[Optional[bytes]], greeting: bytes = b"200 news.example.com ready\r\n"):
        self.host = HOST
        self.port = portend.find_available_local_port()
        self.replies = list(replies)
        self.greeting = greeting
        self.received: List[bytes] = []
        self.posted: List[bytes] = []
        self.flag = threading.Event()
        super().__init__(daemon=True)

        self.sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self.sock.bind((self.host, self.port))

    def __enter__(self):
        self.start()
        self.flag.wait()
        return self

    def __exit__(self, *args):
        self.join(5)
        self.close()

    def serve(self, conn: socket.socket):
        reader = conn.makefile("rb")
        conn.sendall(self.greeting)
        posting = False
        while self.replies:
            line = reader.readline()
            if not line:
                break
            if posting:
                if line != b".\r\n":
                    self.posted.append(line)
                    continue
                posting = False
            self.received.append(line)
            reply = self.replies.pop(0)
            if reply is None:
                continue
            conn.sendall(reply)
            posting = reply.startswith(b"340")

    def run(self) -> None:
        self.sock.settimeout(5)
        self.sock.listen(1)
        self.flag.set()
        try:
            conn, addr = self.sock.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5)
            try:
                self.serve(conn)
            except OSError:
                pass

    def close(self):
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def commands(self) -> List[str]:
        return [line.decode("utf-8").rstrip("\r\n") for line in self.received]


def connect(server: NNTPServer) -> nntpclient.Connection:
    return nntpclient.dial(server.host, server.port, timeout=5)


@contextlib.contextmanager
def session(*replies: bytes):
    """A connection to a server that answers with `replies` in order,
    followed by the reply to the QUIT sent when the block ends.
    """
    with NNTPServer(list(replies) + [b"205 bye\r\n"]) as server:
        conn = connect(server)
        try:
            yield server, conn
        finally:
            if not conn.closed:
                conn.quit()
