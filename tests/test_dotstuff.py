import io

import pytest

from tests.testsupport import *
from nntpclient import BodyReader, NNTPProtocolError, dot_stuff_lines, read_lines


def test_body_reader_lines():
    reader = BodyReader(line_source(wire("Hello", "..escaped", ".", "after")))
    assert reader.readline() == b"Hello\n"
    assert reader.readline() == b".escaped\n"
    assert reader.readline() == b""
    assert reader.exhausted
    assert reader.read() == b""


def test_body_reader_read_all():
    reader = BodyReader(line_source(b"first\r\nsecond\n.\r\n"))
    assert reader.read() == b"first\nsecond\n"


def test_body_reader_small_reads():
    reader = BodyReader(line_source(wire("abcdef", ".")))
    assert reader.read(4) == b"abcd"
    assert reader.read(4) == b"ef\n"
    assert reader.read(4) == b""


def test_body_reader_iterates_lines():
    reader = BodyReader(line_source(wire("one", "", "..", "three", ".")))
    assert list(reader) == [b"one\n", b"\n", b".\n", b"three\n"]


def test_body_reader_is_lazy():
    calls = []
    source = line_source(wire("one", "two", "."))

    def readline():
        calls.append(1)
        return source()

    reader = BodyReader(readline)
    assert len(calls) == 0
    reader.readline()
    assert len(calls) == 1
    reader.readline()
    assert len(calls) == 2


def test_body_reader_leaves_rest_of_stream():
    data = io.BytesIO(wire("body", ".", "211 next reply"))
    reader = BodyReader(data.readline)
    assert reader.read() == b"body\n"
    assert data.readline() == b"211 next reply\r\n"


def test_body_reader_discard():
    data = io.BytesIO(wire("one", "two", "three", ".", "205 bye"))
    reader = BodyReader(data.readline)
    assert reader.readline() == b"one\n"
    reader.discard()
    assert reader.exhausted
    assert data.readline() == b"205 bye\r\n"


def test_body_reader_discard_after_close():
    data = io.BytesIO(wire("one", "two", ".", "205 bye"))
    reader = BodyReader(data.readline)
    reader.close()
    reader.discard()
    assert data.readline() == b"205 bye\r\n"


def test_body_reader_closed():
    reader = BodyReader(line_source(wire("one", ".")))
    reader.close()
    with pytest.raises(ValueError):
        reader.read()
    with pytest.raises(ValueError):
        reader.readline()


def test_body_reader_missing_terminator():
    reader = BodyReader(line_source(wire("one")))
    assert reader.readline() == b"one\n"
    with pytest.raises(NNTPProtocolError):
        reader.readline()


def test_read_lines():
    lines = read_lines(line_source(wire("VERSION 2", "..hidden", "READER", ".")))
    assert lines == [b"VERSION 2", b".hidden", b"READER"]


def test_read_lines_empty():
    assert read_lines(line_source(wire("."))) == []


def test_dot_stuff_lines():
    lines = [b"Subject: test\n", b"\n", b"..escaped\n", b".\r\n", b"no newline"]
    assert list(dot_stuff_lines(lines)) == [
        b"Subject: test\r\n",
        b"\r\n",
        b"...escaped\r\n",
        b"..\r\n",
        b"no newline\r\n",
    ]


def test_dot_stuff_text_lines():
    assert list(dot_stuff_lines(["héllo\n", ".dot"])) == ["héllo\r\n".encode("utf-8"), b"..dot\r\n"]


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"plain line\n",
        b".\n",
        b"..\n",
        b"..escaped\n",
        b"...three\n.x\n\n",
        b"mixed\n.\n.. \nend\n",
    ],
)
def test_round_trip(payload: bytes):
    encoded = b"".join(dot_stuff_lines(io.BytesIO(payload))) + b".\r\n"
    assert BodyReader(line_source(encoded)).read() == payload
