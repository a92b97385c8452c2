"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Tests for request/response converters and the converter registry.
"""

import json

import pytest

from courier.converters import (
    IDENTITY_REQUEST_CONVERTER,
    IDENTITY_RESPONSE_CONVERTER,
    ConverterRegistry,
    FormRequestConverter,
    JsonRequestConverter,
    JsonResponseConverter,
    RequestConverter,
    ResponseConverter,
    StringResponseConverter,
)
from courier.exceptions import ConfigurationError, ConverterNotRegisteredError
from courier.models import Method, RawResponse, Request


def _post(body, headers=None):
    return Request(Method.POST, "https://api.example.com/books", headers=headers, body=body)


def _raw(request, body, headers=None):
    return RawResponse(request=request, status_code=200, body=body, headers=headers or {})


class TestIdentityConverters:
    def test_request_body_passed_through(self):
        body = object()
        raw = IDENTITY_REQUEST_CONVERTER.to_raw(_post(body))
        assert raw.body is body

    def test_response_bytes_passed_through(self, get_user_request):
        response = IDENTITY_RESPONSE_CONVERTER.from_raw(_raw(get_user_request, b"\x00\x01"))
        assert response.body == b"\x00\x01"

    def test_protocols_satisfied(self):
        assert isinstance(IDENTITY_REQUEST_CONVERTER, RequestConverter)
        assert isinstance(IDENTITY_RESPONSE_CONVERTER, ResponseConverter)


class TestJsonRequestConverter:
    def test_none_body_becomes_empty_string(self):
        raw = JsonRequestConverter().to_raw(_post(None))
        assert raw.body == ""

    def test_mapping_serialized_in_insertion_order(self):
        raw = JsonRequestConverter().to_raw(_post({"id": 2, "bookName": "1984"}))
        assert raw.body == '{"id":2,"bookName":"1984"}'

    def test_round_trip_through_json_response_converter(self):
        raw = JsonRequestConverter().to_raw(_post({"id": 1, "name": "A"}))
        response = JsonResponseConverter().from_raw(
            _raw(raw.request, raw.body.encode("utf-8"))
        )
        assert response.body == {"id": 1, "name": "A"}

    def test_list_serialized(self):
        raw = JsonRequestConverter().to_raw(_post([1, 2, {"a": None}]))
        assert json.loads(raw.body) == [1, 2, {"a": None}]

    def test_other_body_uses_str(self):
        assert JsonRequestConverter().to_raw(_post(42)).body == "42"
        assert JsonRequestConverter().to_raw(_post("already json")).body == "already json"

    def test_sets_content_type_for_structured_body(self):
        raw = JsonRequestConverter().to_raw(_post({"a": 1}))
        assert raw.headers["Content-Type"] == "application/json"

    def test_keeps_caller_content_type(self):
        raw = JsonRequestConverter().to_raw(
            _post({"a": 1}, headers={"content-type": "application/vnd.api+json"})
        )
        assert raw.headers == {"content-type": "application/vnd.api+json"}

    def test_original_request_untouched(self):
        request = _post({"a": 1})
        JsonRequestConverter().to_raw(request)
        assert request.headers == {}

    def test_non_ascii_kept(self):
        raw = JsonRequestConverter().to_raw(_post({"name": "Zoë"}))
        assert raw.body == '{"name":"Zoë"}'


class TestFormRequestConverter:
    def test_mapping_urlencoded(self):
        raw = FormRequestConverter().to_raw(_post({"q": "a b", "page": 2}))
        assert raw.body == "q=a+b&page=2"
        assert raw.headers["Content-Type"] == "application/x-www-form-urlencoded"

    def test_none_body(self):
        assert FormRequestConverter().to_raw(_post(None)).body == ""


class TestResponseConverters:
    def test_json_empty_body_is_none(self, get_user_request):
        response = JsonResponseConverter().from_raw(_raw(get_user_request, b""))
        assert response.body is None

    def test_json_decodes_mapping(self, raw_response):
        response = JsonResponseConverter().from_raw(raw_response)
        assert response.body == {"id": 1, "name": "Joe"}
        assert response.raw is raw_response
        assert response.request is raw_response.request

    def test_json_malformed_propagates(self, get_user_request):
        with pytest.raises(json.JSONDecodeError):
            JsonResponseConverter().from_raw(_raw(get_user_request, b"{not json"))

    def test_string_decodes_utf8(self, get_user_request):
        response = StringResponseConverter().from_raw(_raw(get_user_request, "héllo".encode()))
        assert response.body == "héllo"

    def test_string_uses_declared_charset(self, get_user_request):
        raw = _raw(
            get_user_request,
            "héllo".encode("latin-1"),
            headers={"Content-Type": "text/plain; charset=latin-1"},
        )
        assert StringResponseConverter().from_raw(raw).body == "héllo"

    def test_string_empty_body_is_none(self, get_user_request):
        assert StringResponseConverter().from_raw(_raw(get_user_request, b"")).body is None


class TestConverterRegistry:
    def test_no_key_resolves_identity(self):
        registry = ConverterRegistry("request", IDENTITY_REQUEST_CONVERTER)
        assert registry.resolve(None) is IDENTITY_REQUEST_CONVERTER

    def test_registered_key_resolves(self):
        registry = ConverterRegistry("request", IDENTITY_REQUEST_CONVERTER)
        converter = JsonRequestConverter()
        registry.register(converter)
        assert registry.resolve("json") is converter
        assert "json" in registry
        assert len(registry) == 1

    def test_unknown_key_is_configuration_error(self):
        registry = ConverterRegistry("response", IDENTITY_RESPONSE_CONVERTER)
        with pytest.raises(ConverterNotRegisteredError) as excinfo:
            registry.resolve("xml")
        assert isinstance(excinfo.value, ConfigurationError)
        assert excinfo.value.key == "xml"
        assert excinfo.value.kind == "response"

    def test_last_registration_wins(self):
        registry = ConverterRegistry("response", IDENTITY_RESPONSE_CONVERTER)
        first, second = JsonResponseConverter(), JsonResponseConverter()
        registry.register(first)
        registry.register(second)
        assert registry.resolve("json") is second
        assert len(registry) == 1

    def test_converter_without_key_rejected(self):
        class Keyless:
            def to_raw(self, request):
                return None

        registry = ConverterRegistry("request", IDENTITY_REQUEST_CONVERTER)
        with pytest.raises(TypeError):
            registry.register(Keyless())

    def test_frozen_registry_rejects_registration(self):
        registry = ConverterRegistry("request", IDENTITY_REQUEST_CONVERTER).freeze()
        with pytest.raises(RuntimeError):
            registry.register(JsonRequestConverter())
