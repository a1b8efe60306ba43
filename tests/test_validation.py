"""
Tests for the individual expectations of a validatable response.
"""

import pytest
from hamcrest import contains_string, greater_than, less_than, starts_with

from restchain import ExpectationsFailedError, Response


def json_response(body: bytes = b'{"user": {"name": "Johan", "age": 42}}', **kwargs):
    headers = {"Content-Type": "application/json; charset=utf-8", "X-Trace": "abc"}
    return Response(200, headers, body, **kwargs)


def failures_of(block):
    with pytest.raises(ExpectationsFailedError) as exc_info:
        json_response(cookies={"session": "s1"}, elapsed_ms=40.0).then(block)
    return exc_info.value.failures


class TestPassingExpectations:
    """Test expectations a response satisfies."""

    def test_every_expectation_kind(self):
        """Test that satisfied expectations of every kind pass together."""
        json_response(cookies={"session": "s1"}, elapsed_ms=40.0).then(
            lambda res: res.status_code(200)
            .status_line(starts_with("HTTP/1.1 200"))
            .headers({"X-Trace": "abc"}, **{"Content-Type": contains_string("json")})
            .content_type("APPLICATION/JSON")
            .cookie("session")
            .cookie("session", "s1")
            .time(less_than(1000))
            .body(contains_string("Johan"))
            .body("user.name", "Johan", "user.age", greater_than(40))
        )

    def test_response_is_the_validated_response(self):
        """Test that the validatable response hands back the response it validates."""
        response = json_response()

        assert response.then(lambda res: res.status_code(200)).response() is response

    def test_root_prefixes_paths(self):
        """Test that root paths are prepended until no_root is called."""
        json_response().then(
            lambda res: res.root("user").body("name", "Johan").and_().assert_that()
            .no_root().body("user.age", 42)
        )


class TestFailureMessages:
    """Test how failed expectations are described."""

    def test_header(self):
        """Test the description of a mismatching header."""
        assert failures_of(lambda res: res.header("X-Trace", "xyz")) == [
            "Expected header \"X-Trace\" was not 'xyz', was \"abc\".\n"
        ]

    def test_missing_cookie(self):
        """Test that an expected cookie must be present."""
        assert failures_of(lambda res: res.cookie("theme")) == [
            'Expected cookie "theme" was not not None, was "None".\n'
        ]

    def test_time(self):
        """Test the description of a slow response."""
        assert failures_of(lambda res: res.time(less_than(10))) == [
            "Expected response time was not a value less than <10>, was 40 milliseconds.\n"
        ]

    def test_content_type(self):
        """Test the description of a mismatching content type."""
        [failure] = failures_of(lambda res: res.content_type("text/html"))

        assert failure.startswith("Expected content-type ")
        assert failure.endswith('actual content-type "application/json; charset=utf-8".\n')

    def test_status_code_matcher(self):
        """Test that a matcher for the status code is described by the matcher."""
        assert failures_of(lambda res: res.status_code(greater_than(300))) == [
            "Expected status code <a value greater than <300>> but was <200>.\n"
        ]

    def test_whole_body(self):
        """Test the description of a body that does not match."""
        [failure] = failures_of(lambda res: res.body(contains_string("Bye")))

        assert failure.startswith("Response body doesn't match expectation.\n")
        assert "Johan" in failure

    def test_missing_path_is_none(self):
        """Test that an absent path is reported as None."""
        assert failures_of(lambda res: res.body("user.email", "x@example.com")) == [
            "JSON path user.email doesn't match.\nExpected: 'x@example.com'\n  Actual: None\n"
        ]


class TestBodyArguments:
    """Test how body() checks its arguments."""

    def test_none_expects_json_null(self):
        """Test that None as the expected value matches a null or absent path."""
        json_response(b'{"user": null}').then(lambda res: res.body("user", None, "email", None))

        with pytest.raises(ExpectationsFailedError):
            json_response().then(lambda res: res.body("user.name", None))

    def test_path_without_matcher(self):
        """Test that a path must be followed by a matcher."""
        with pytest.raises(ValueError):
            json_response().then().body("user.name")

    def test_odd_number_of_arguments(self):
        """Test that path and matcher arguments must come in pairs."""
        with pytest.raises(ValueError):
            json_response().then().body("user.name", "Johan", "user.age")
