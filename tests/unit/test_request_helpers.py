"""
Unit tests for request-description helpers.
"""

import json

import pytest

from idp_client.errors import ConfigurationError, RequiredParameterError
from idp_client.runtime import (
    FormData,
    QueryParamConfig,
    RequestOpts,
    apply_query_params,
    build_url,
    merge_headers,
    path_param,
    querystring,
    serialize_body,
    validate_required_request_params,
)

BASE_URL = "https://tenant.example.com/api/v2"


class TestBuildUrl:
    """Test cases for URL construction."""

    def test_no_query(self):
        """Test that a missing query map adds nothing."""
        url = build_url(BASE_URL, RequestOpts(path="/logs/5", method="GET"))

        assert url == "https://tenant.example.com/api/v2/logs/5"

    def test_empty_query_has_no_trailing_question_mark(self):
        """Test that an empty query map never leaves a dangling '?'."""
        url = build_url(BASE_URL, RequestOpts(path="/logs", method="GET", query={}))

        assert not url.endswith("?")
        assert "?" not in url

    def test_query_of_only_none_values(self):
        """Test that a query map whose values are all skipped adds nothing."""
        url = build_url(BASE_URL, RequestOpts(path="/logs", method="GET", query={"q": None}))

        assert url == f"{BASE_URL}/logs"

    def test_query_appended(self):
        """Test that query parameters are encoded and appended."""
        url = build_url(
            BASE_URL,
            RequestOpts(path="/logs", method="GET", query={"q": "type:s", "include_fields": True})
        )

        assert url == f"{BASE_URL}/logs?q=type%3As&include_fields=true"

    def test_method_normalized(self):
        """Test that methods are upper-cased and validated."""
        assert RequestOpts(path="/", method="get").method == "GET"
        with pytest.raises(ConfigurationError, match="Unsupported HTTP method: FETCH"):
            RequestOpts(path="/", method="FETCH")


class TestQuerystring:
    """Test cases for query-string rendering."""

    def test_list_values_repeat_key(self):
        assert querystring({"fields": ["a", "b"]}) == "fields=a&fields=b"

    def test_encodes_like_encode_uri_component(self):
        assert querystring({"q": "a b&c/d", "x": "it's(ok)!"}) == "q=a%20b%26c%2Fd&x=it's(ok)!"

    def test_booleans_and_numbers(self):
        assert querystring({"page": 0, "include_totals": False}) == "page=0&include_totals=false"

    def test_path_param_encoding(self):
        assert path_param("auth0|123") == "auth0%7C123"


class TestMergeHeaders:
    """Test cases for header merging."""

    def test_later_source_wins(self):
        headers = merge_headers({"Accept": "text/plain"}, {"Accept": "application/json"})

        assert headers == {"Accept": "application/json"}

    def test_none_removes_key(self):
        """Test that an explicit None drops the header instead of sending it."""
        headers = merge_headers(
            {"Authorization": "Bearer x", "Client-Info": "abc"},
            {"Client-Info": None, "X-Extra": "1"}
        )

        assert headers == {"Authorization": "Bearer x", "X-Extra": "1"}

    def test_none_in_defaults_is_dropped(self):
        assert merge_headers({"A": None}, None) == {}


class TestSerializeBody:
    """Test cases for body serialization."""

    def test_structured_value_becomes_json(self):
        assert json.loads(serialize_body({"name": "x", "n": [1, 2]})) == {"name": "x", "n": [1, 2]}

    def test_binary_passes_through(self):
        body = b"\x00\x01binary"

        assert serialize_body(body) is body

    def test_form_data_passes_through(self):
        form = FormData(data={"a": "1"})

        assert serialize_body(form) is form

    def test_none_means_no_body(self):
        assert serialize_body(None) is None

    def test_string_is_json_encoded(self):
        assert serialize_body("text") == '"text"'


class TestRequiredParams:
    """Test cases for required-parameter validation."""

    def test_passes_when_present(self):
        validate_required_request_params({"kid": "abc", "other": 0}, ["kid", "other"])

    def test_missing_key(self):
        with pytest.raises(RequiredParameterError) as exc_info:
            validate_required_request_params({"email": "a@b.c"}, ["email", "connection"])

        assert exc_info.value.field == "connection"
        assert str(exc_info.value) == "Required parameter requestParameters.connection was null or undefined."

    def test_names_first_missing_key(self):
        with pytest.raises(RequiredParameterError) as exc_info:
            validate_required_request_params({"a": None}, ["a", "b"])

        assert exc_info.value.field == "a"


class TestApplyQueryParams:
    """Test cases for query map construction."""

    def test_skips_absent_keys(self):
        query = apply_query_params({"page": 1}, [("page", QueryParamConfig()), ("per_page", QueryParamConfig())])

        assert query == {"page": 1}

    @pytest.mark.parametrize("fmt,expected", [
        ("csv", "a,b"),
        ("ssv", "a b"),
        ("tsv", "a\tb"),
        ("pipes", "a|b"),
    ])
    def test_collection_formats(self, fmt, expected):
        config = QueryParamConfig(is_array=True, collection_format=fmt)

        assert apply_query_params({"ids": ["a", "b"]}, [("ids", config)]) == {"ids": expected}

    def test_multi_keeps_list(self):
        config = QueryParamConfig(is_array=True, is_collection_format_multi=True)
        query = apply_query_params({"ids": ["a", "b"]}, [("ids", config)])

        assert query == {"ids": ["a", "b"]}
        assert querystring(query) == "ids=a&ids=b"
