"""Tests for the naming module."""

import logging

import pytest

from stubgen.config import RUST_RESERVED_WORDS, GeneratorConfig
from stubgen.naming import (
    camelize,
    escape_reserved_word,
    is_reserved_word,
    member_name,
    model_file_name,
    model_type_name,
    operation_name,
    param_name,
    sanitize_name,
    snake_case,
)

_CONFIG = GeneratorConfig()


class TestHelpers:
    """Test the pure casing and sanitizing helpers."""

    def test_snake_case(self):
        assert snake_case("PetId") == "pet_id"
        assert snake_case("HTTPServer") == "http_server"
        assert snake_case("NanoCPUs") == "nano_cp_us"

    def test_camelize(self):
        assert camelize("phone_number") == "PhoneNumber"
        assert camelize("model_200_response") == "Model200Response"

    def test_sanitize_name(self):
        assert sanitize_name("com.example.vendor") == "com_example_vendor"
        assert sanitize_name("Status[]") == "Status"
        assert sanitize_name("a b$c") == "a_bc"

    def test_reserved_word_check_ignores_case(self):
        assert is_reserved_word(_CONFIG, "Self")
        assert is_reserved_word(_CONFIG, "TYPE")
        assert not is_reserved_word(_CONFIG, "container")


class TestMemberName:
    """Test struct field / parameter name normalization."""

    def test_dash_to_underscore(self):
        assert member_name(_CONFIG, "created-at") == "created_at"

    def test_camel_case(self):
        assert member_name(_CONFIG, "PetId") == "pet_id"

    def test_upper_case_constant_unchanged(self):
        assert member_name(_CONFIG, "ID") == "ID"
        assert member_name(_CONFIG, "API_KEY") == "API_KEY"

    @pytest.mark.parametrize("word", sorted(RUST_RESERVED_WORDS))
    def test_reserved_word_prefixed(self, word):
        assert member_name(_CONFIG, word) == "_" + word

    def test_reserved_after_snake_case(self):
        assert member_name(_CONFIG, "Type") == "_type"

    def test_leading_digit(self):
        assert member_name(_CONFIG, "1stField") == "var_1st_field"
        assert member_name(_CONFIG, "123") == "var_123"

    def test_param_name_same_rules(self):
        assert param_name(_CONFIG, "shared-size") == "shared_size"
        assert param_name(_CONFIG, "type") == "_type"

    def test_valid_identifier(self):
        for raw in ("com.docker.stack", "X-Registry-Auth", "9lives", "match"):
            assert member_name(_CONFIG, raw).isidentifier()


class TestEscapeReservedWord:
    """Test the reserved-word escape."""

    def test_single_underscore(self):
        assert escape_reserved_word(_CONFIG, "type") == "_type"

    def test_repeats_until_clean(self):
        config = GeneratorConfig(reserved_words={"type", "_type"})
        assert escape_reserved_word(config, "type") == "__type"

    def test_default_words_have_no_underscore_entries(self):
        assert not any(w.startswith("_") for w in _CONFIG.reserved_words)


class TestModelName:
    """Test model file and type name normalization."""

    def test_plain(self):
        assert model_file_name(_CONFIG, "ContainerSummary") == "container_summary"
        assert model_type_name(_CONFIG, "ContainerSummary") == "ContainerSummary"

    def test_reserved(self, caplog):
        with caplog.at_level(logging.WARNING, logger="stubgen.naming"):
            assert model_file_name(_CONFIG, "return") == "model_return"
        assert "Reserved word" in caplog.text
        assert model_type_name(_CONFIG, "Type") == "ModelType"

    def test_leading_digit(self, caplog):
        with caplog.at_level(logging.WARNING, logger="stubgen.naming"):
            assert model_file_name(_CONFIG, "200Response") == "model_200_response"
        assert "starts with number" in caplog.text
        assert model_type_name(_CONFIG, "200Response") == "Model200Response"

    def test_prefix_and_suffix(self):
        config = GeneratorConfig(model_name_prefix="Docker", model_name_suffix="Dto")
        assert model_file_name(config, "Port") == "docker_port_dto"
        assert model_type_name(config, "Port") == "DockerPortDto"

    def test_sanitized(self):
        assert model_type_name(_CONFIG, "Plugin.Config") == "PluginConfig"

    @pytest.mark.parametrize("raw", [
        "ContainerSummary", "Type", "200Response", "Plugin.Config", "HTTPHeaders", "self",
    ])
    def test_idempotent_without_prefix(self, raw):
        once = model_file_name(_CONFIG, raw)
        assert model_file_name(_CONFIG, once) == once

    def test_type_name_round_trip(self):
        name = model_type_name(_CONFIG, "Type")
        assert model_type_name(_CONFIG, name) == name

    def test_prefix_not_idempotent(self):
        """Regression oracle: a configured prefix is applied again on re-normalization."""
        config = GeneratorConfig(model_name_prefix="Api")
        once = model_file_name(config, "Port")
        assert once == "api_port"
        assert model_file_name(config, once) == "api_api_port"


class TestOperationName:
    """Test operationId normalization."""

    def test_plain(self):
        assert operation_name(_CONFIG, "ContainerList") == "container_list"

    def test_reserved(self):
        assert operation_name(_CONFIG, "delete") == "delete"
        assert operation_name(_CONFIG, "move") == "call_move"
        assert operation_name(_CONFIG, "Match") == "call_match"

    def test_leading_digit(self):
        assert operation_name(_CONFIG, "2faEnable") == "call_2fa_enable"

    def test_reserved_logged_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="stubgen.naming"):
            operation_name(_CONFIG, "loop")
        assert "cannot be used as method name" in caplog.text
