import pytest

from ftpput import Reply, codes
from ftpput.replies import parse


def test_parse_reply_line():
    reply = parse("220 ready")
    assert reply == Reply(code="220", line="220 ready")
    assert reply.message == "ready"
    assert reply.description == codes[220]
    assert str(reply) == "220 ready"


@pytest.mark.parametrize(
    "line",
    [
        "",
        "220",
        "220-Welcome, continued below",
        "22 short",
        "abc def",
        " 220 indented",
        "Welcome to the server",
        "２２０ full width digits",
    ],
)
def test_non_reply_lines_are_noise(line):
    assert parse(line) is None


def test_code_followed_by_space_and_nothing_else():
    reply = parse("200 ")
    assert reply.code == "200"
    assert reply.message == ""


def test_unknown_code_description():
    assert parse("299 custom").description == "Unknown reply code"
