# pylint: disable=missing-docstring

import re

from pytest import raises

from .. import ConfigException
from ..boundary import boundary_factory, random_boundary, time_boundary
from ..output import Output
from ..request import RequestTemplate


class TestOutput:
    def test_text_and_bytes(self):
        with Output("ISO-8859-1") as output:
            output.write("né").write(b"\x00\xff")
            assert output.to_bytes() == b"n\xe9\x00\xff"
            assert len(output) == 4

    def test_closed_after_block(self):
        with Output() as output:
            output.write("x")

        assert output.closed
        with raises(ValueError):
            output.write("more")

    def test_closed_on_error(self):
        with raises(RuntimeError):
            with Output() as output:
                raise RuntimeError("boom")
        assert output.closed

    def test_unknown_charset(self):
        with raises(ConfigException):
            Output("klingon-8")


class TestBoundary:
    def test_time_boundary_is_hex(self):
        assert re.fullmatch(r"[0-9a-f]+", time_boundary())

    def test_random_boundary(self):
        first, second = random_boundary(), random_boundary()
        assert re.fullmatch(r"[0-9a-f]{32}", first)
        assert first != second

    def test_factory_lookup(self):
        assert boundary_factory("random") is random_boundary
        with raises(ConfigException):
            boundary_factory("uuid")


class TestRequestTemplate:
    def test_header_reset(self):
        template = RequestTemplate({"Content-Type": ["text/plain", "text/html"]})
        template.header("content-type")
        template.header("Content-Type", "multipart/form-data")

        assert template.headers == {"Content-Type": ["multipart/form-data"]}

    def test_header_appends(self):
        template = RequestTemplate().header("X-Tag", "a").header("x-tag", "b")
        assert template.header_values("X-TAG") == ["a", "b"]

    def test_body(self):
        template = RequestTemplate().body(b"\x00", None)
        assert template.body_bytes == b"\x00"
        assert template.body_charset is None
