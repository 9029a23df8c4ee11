"""Tests for schema descriptors and field validators."""

import re

from rtprovider.resource.schema import (
    Attribute,
    AttrType,
    Diagnostic,
    ValidationError,
    merge_schema,
    validate_config,
)
from rtprovider.resource.validators import (
    all_of,
    int_at_least,
    is_url_with_http_or_https,
    string_does_not_contain_any,
    string_does_not_match,
    string_in_slice,
)


class TestValidators:
    """Tests for individual validators."""

    def test_does_not_match(self):
        """Test regex rejection."""
        validate = string_does_not_match(re.compile(r"^[0-9].*"), "must not begin with a number")

        assert validate("0bad", "key") == [
            "invalid value for key (must not begin with a number)"
        ]
        assert validate("good", "key") == []

    def test_does_not_contain_any(self):
        """Test forbidden character rejection."""
        validate = string_does_not_contain_any(" !@")

        assert validate("my repo", "key")
        assert validate("my-repo", "key") == []

    def test_in_slice(self):
        """Test allowed value sets."""
        validate = string_in_slice(["a", "b"])

        assert validate("a", "k") == []
        assert validate("c", "k")
        assert string_in_slice(["Maven"], ignore_case=True)("maven", "k") == []

    def test_non_string_rejected(self):
        """Test string validators reject other types."""
        assert string_in_slice(["a"])(1, "k") == ["expected type of k to be string"]

    def test_int_at_least(self):
        """Test integer minimum."""
        validate = int_at_least(0)

        assert validate(0, "n") == []
        assert validate(-1, "n")
        assert validate(True, "n")

    def test_url(self):
        """Test URL validation."""
        assert is_url_with_http_or_https("https://github.com/rust-lang/crates.io-index", "u") == []
        assert is_url_with_http_or_https("ftp://example.com", "u")
        assert is_url_with_http_or_https("", "u")
        assert is_url_with_http_or_https("not a url", "u")

    def test_all_of_collects_everything(self):
        """Test composed validators report every failure."""
        validate = all_of(
            string_does_not_match(re.compile(r"^[0-9].*"), "no leading digit"),
            string_does_not_contain_any(" "),
        )

        assert len(validate("0 bad", "key")) == 2


class TestAttribute:
    """Tests for Attribute helpers."""

    def test_zero_values(self):
        """Test zero values per type."""
        assert Attribute(AttrType.STRING).zero_value() == ""
        assert Attribute(AttrType.BOOL).zero_value() is False
        assert Attribute(AttrType.INT).zero_value() == 0
        assert Attribute(AttrType.SET).zero_value() == set()
        assert Attribute(AttrType.LIST).zero_value() == []

    def test_default_func_wins(self):
        """Test default_func is used when present."""
        attr = Attribute(AttrType.INT, default=1, default_func=lambda: 7200)
        assert attr.default_value() == 7200

    def test_bool_is_not_int(self):
        """Test booleans are rejected for INT attributes."""
        assert Attribute(AttrType.INT).type_error("n", True)
        assert Attribute(AttrType.INT).type_error("n", 3) is None

    def test_is_block(self):
        """Test nested schemas mark blocks."""
        assert Attribute(AttrType.LIST, elem={"a": Attribute(AttrType.BOOL)}).is_block
        assert not Attribute(AttrType.LIST, elem=AttrType.STRING).is_block


class TestMergeSchema:
    """Tests for schema composition."""

    def test_later_wins(self):
        """Test later definitions override earlier ones."""
        first = {"a": Attribute(AttrType.STRING), "b": Attribute(AttrType.BOOL)}
        second = {"a": Attribute(AttrType.INT)}

        merged = merge_schema(first, second)

        assert merged["a"].type is AttrType.INT
        assert merged["b"].type is AttrType.BOOL
        assert first["a"].type is AttrType.STRING


class TestValidateConfig:
    """Tests for configuration validation."""

    schema = {
        "key": Attribute(AttrType.STRING, required=True),
        "count": Attribute(AttrType.INT, optional=True, validate=int_at_least(0)),
        "sync": Attribute(
            AttrType.LIST,
            optional=True,
            max_items=1,
            elem={"enabled": Attribute(AttrType.BOOL, optional=True)},
        ),
    }

    def test_valid(self):
        """Test a valid configuration yields nothing."""
        assert validate_config(self.schema, {"key": "k", "count": 1}) == []

    def test_missing_required(self):
        """Test required attributes are reported."""
        diagnostics = validate_config(self.schema, {})

        assert diagnostics == [Diagnostic('The argument "key" is required', "key")]

    def test_unknown_key(self):
        """Test unexpected attributes are reported."""
        diagnostics = validate_config(self.schema, {"key": "k", "nope": 1})

        assert [d.attribute for d in diagnostics] == ["nope"]

    def test_type_and_validator_errors(self):
        """Test all problems are collected."""
        diagnostics = validate_config(self.schema, {"key": 5, "count": -1})

        assert {d.attribute for d in diagnostics} == {"key", "count"}

    def test_block_max_items(self):
        """Test block cardinality is enforced."""
        diagnostics = validate_config(
            self.schema, {"key": "k", "sync": [{"enabled": True}, {"enabled": False}]}
        )

        assert len(diagnostics) == 1
        assert "no more than 1" in diagnostics[0].summary

    def test_nested_block_errors(self):
        """Test nested values are validated with a path prefix."""
        diagnostics = validate_config(self.schema, {"key": "k", "sync": [{"enabled": "yes"}]})

        assert diagnostics[0].attribute == "sync.0.enabled"

    def test_validation_error_message(self):
        """Test ValidationError joins its diagnostics."""
        error = ValidationError([Diagnostic("bad", "key"), Diagnostic("worse")])

        assert str(error) == "key: bad; worse"
