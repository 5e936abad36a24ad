import io

from tests.testsupport import *
from nntpclient import Article, HeaderDict, read_header


def make_article(body=None) -> Article:
    headers = HeaderDict()
    headers.add("From", "user@example.com")
    headers.add("Newsgroups", "alt.test")
    headers.add("Subject", "Hello")
    headers.add("Newsgroups", "alt.test.2")
    return Article(headers, body)


def test_write_to():
    article = make_article(b"line one\n..escaped\n")
    output = io.BytesIO()
    written = article.write_to(output)
    assert output.getvalue() == (
        b"From: user@example.com\n"
        b"Newsgroups: alt.test\n"
        b"Newsgroups: alt.test.2\n"
        b"Subject: Hello\n"
        b"\n"
        b"line one\n"
        b"..escaped\n"
    )
    assert written == len(output.getvalue())


def test_no_body_no_separator():
    output = io.BytesIO()
    make_article().write_to(output)
    assert not output.getvalue().endswith(b"\n\n")


def test_text_body():
    article = Article({"Subject": "x"}, "grüße\n")
    assert article.body.read() == "grüße\n".encode("utf-8")
    assert isinstance(article.headers, HeaderDict)


def test_headers_survive_write_and_parse():
    article = make_article(b"body\n")
    output = io.BytesIO()
    article.write_to(output)
    output.seek(0)
    headers = read_header(output)
    assert headers == make_article().headers
    assert output.read() == b"body\n"


def test_str():
    article = make_article()
    assert str(article) == "[NNTP article]"
    article.headers["message-id"] = "<abc@example.com>"
    assert str(article) == "[NNTP article <abc@example.com>]"
    assert article.message_id == "<abc@example.com>"
