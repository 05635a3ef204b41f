"""Tests for switchyard.http.query — flat query mapping."""

from switchyard.http.query import QueryParams, split_url


class TestQueryParams:
    def test_basic(self) -> None:
        query = QueryParams("foo=bar&bar=foo")
        assert dict(query) == {"foo": "bar", "bar": "foo"}

    def test_last_value_wins(self) -> None:
        query = QueryParams("a=1&a=2")
        assert query["a"] == "2"
        assert query.get("a") == "2"
        assert query.get_list("a") == ["1", "2"]

    def test_blank_values_kept(self) -> None:
        query = QueryParams("flag=&x=1")
        assert query["flag"] == ""

    def test_percent_decoding(self) -> None:
        query = QueryParams("q=hello%20world&p=a+b")
        assert query["q"] == "hello world"
        assert query["p"] == "a b"

    def test_empty(self) -> None:
        query = QueryParams()
        assert len(query) == 0
        assert query.get("x") is None
        assert query.get_list("x") == []

    def test_get_int(self) -> None:
        query = QueryParams("page=3&bad=x")
        assert query.get_int("page") == 3
        assert query.get_int("bad", 1) == 1
        assert query.get_int("missing") is None

    def test_equality_with_dict(self) -> None:
        assert QueryParams("a=1") == {"a": "1"}

    def test_raw(self) -> None:
        assert QueryParams("a=1&a=2").raw == "a=1&a=2"


class TestSplitUrl:
    def test_absolute(self) -> None:
        assert split_url("https://example.com/a/b?x=1") == ("/a/b", "x=1")

    def test_double_slash_target_stays_a_path(self) -> None:
        assert split_url("//users/42?tab=1") == ("//users/42", "tab=1")

    def test_fragment_dropped(self) -> None:
        assert split_url("/a?x=1#frag") == ("/a", "x=1")
        assert split_url("/a#frag?x=1") == ("/a", "")

    def test_no_query(self) -> None:
        assert split_url("/a") == ("/a", "")
