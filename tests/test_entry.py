"""Tests for reference entries and field values."""
import re

import pytest
from network_cmdref.command_reference import (
    CommandRef,
    ConstructionError,
    InvocationError,
    LoadError,
    NamedTemplate,
    PositionalTemplate,
    ResolutionError,
    StaticValue,
    preprocess_value,
)


class TestPreprocessValue:
    """Tests for regexp-like string conversion."""

    def test_case_sensitive_regex(self):
        """'/.../' becomes a case-sensitive pattern."""
        value = preprocess_value(r"/^tacacs-server host (\S+)/")

        assert isinstance(value, re.Pattern)
        assert value.pattern == r"^tacacs-server host (\S+)"
        assert not value.flags & re.IGNORECASE

    def test_case_insensitive_regex(self):
        """'/.../i' becomes a case-insensitive pattern."""
        value = preprocess_value("/foo/i")

        assert isinstance(value, re.Pattern)
        assert value.pattern == "foo"
        assert value.flags & re.IGNORECASE
        assert value.search("FOO")

    def test_recurses_into_lists(self):
        """List items are converted individually."""
        value = preprocess_value(["/a/", "plain", 5])

        assert isinstance(value[0], re.Pattern)
        assert value[1:] == ["plain", 5]

    def test_plain_values_unchanged(self):
        """Strings without slashes and other types pass through."""
        assert preprocess_value("show run") == "show run"
        assert preprocess_value("/") == "/"
        assert preprocess_value(49) == 49
        assert preprocess_value(None) is None

    def test_invalid_regex(self):
        """Strings that look like regexes but don't compile fail the load."""
        with pytest.raises(LoadError) as exc:
            preprocess_value("/timeout (\\d+/")
        assert "Invalid regex 'timeout (\\d+'" in str(exc.value)


class TestNamedTemplate:
    """Tests for <placeholder> templates."""

    def test_unresolved_line_dropped(self):
        """A line with a missing argument is left out."""
        ref = CommandRef("tacacs_server_host", "encryption", {
            "config_set": "<state> tacacs-server host <ip> key <enc_type> <password>",
        })

        assert isinstance(ref.config_set, NamedTemplate)
        assert ref.config_set(ip="10.1.1.1") == []

    def test_all_arguments_given(self):
        """Every placeholder is replaced by its argument."""
        ref = CommandRef("tacacs_server_host", "encryption", {
            "config_set": "<state> tacacs-server host <ip> key <enc_type> <password>",
        })

        result = ref.config_set(state="no", ip="10.1.1.1", enc_type=7, password="secret")

        assert result == ["no tacacs-server host 10.1.1.1 key 7 secret"]

    def test_optional_lines(self):
        """Lines are emitted independently of each other."""
        ref = CommandRef("bgp_af", "address_family", {
            "config_set": [
                "router bgp <asnum>",
                "vrf <vrf>",
                "address-family <afi> <safi>",
            ],
        })

        assert ref.config_set(asnum=55, afi="ipv4", safi="unicast") == [
            "router bgp 55",
            "address-family ipv4 unicast",
        ]
        assert ref.config_set(asnum=55, vrf="red", afi="ipv4", safi="unicast") == [
            "router bgp 55",
            "vrf red",
            "address-family ipv4 unicast",
        ]

    def test_none_renders_empty(self):
        """None arguments render as empty strings."""
        ref = CommandRef("f", "n", {"config_set": "<state>feature bgp"})
        assert ref.config_set(state=None) == ["feature bgp"]

    def test_rendered_regex_compiled(self):
        """Rendered '/.../' lines come back as patterns."""
        ref = CommandRef("tacacs_server_host", "encryption_type", {
            "config_get_token": r"/^tacacs-server host <ip> key (\d+)/",
        })

        result = ref.config_get_token(ip="10.1.1.1")

        assert len(result) == 1
        assert result[0].pattern == r"^tacacs-server host 10.1.1.1 key (\d+)"

    def test_rendered_regex_invalid(self):
        """Arguments that break a rendered regex are invocation errors."""
        ref = CommandRef("f", "n", {"config_get_token": "/^host <ip>$/"})
        with pytest.raises(InvocationError):
            ref.config_get_token(ip="10.1.1.(")

    def test_positional_arguments_rejected(self):
        """Placeholder templates take keyword arguments only."""
        ref = CommandRef("f", "n", {"config_set": "feature <name>"})
        with pytest.raises(InvocationError):
            ref.config_set("bgp")


class TestPositionalTemplate:
    """Tests for printf-style templates."""

    def test_argument_count(self):
        """The marker count across lines is the required argument count."""
        ref = CommandRef("feature", "bgp", {"config_set": "%s feature %s"})

        assert isinstance(ref.config_set, PositionalTemplate)
        assert ref.config_set.arg_count == 2
        assert ref.config_set("no", "bgp") == ["no feature bgp"]

    @pytest.mark.parametrize("args", [("no",), ("no", "bgp", "extra")])
    def test_wrong_argument_count(self, args):
        """Too few or too many arguments fail."""
        ref = CommandRef("feature", "bgp", {"config_set": "%s feature %s"})

        with pytest.raises(InvocationError) as exc:
            ref.config_set(*args)

        assert "requires 2" in str(exc.value)
        assert isinstance(exc.value, TypeError)

    def test_arguments_consumed_per_line(self):
        """Each line takes as many arguments as it has markers."""
        ref = CommandRef("interface", "shutdown", {
            "config_set": ["interface %s", "%s shutdown"],
        })

        assert ref.config_set("ethernet1/1", "no") == [
            "interface ethernet1/1",
            "no shutdown",
        ]

    def test_literal_percent(self):
        """'%%' is not a marker."""
        ref = CommandRef("f", "n", {"config_set": "load-interval %d 100%%"})

        assert ref.config_set.arg_count == 1
        assert ref.config_set(30) == ["load-interval 30 100%"]


class TestStaticValue:
    """Tests for templates without substitutions."""

    def test_static_list(self):
        """Static templates are normalized to compiled lists."""
        ref = CommandRef("feature", "bgp", {"config_get_token": "/^feature bgp$/"})

        assert isinstance(ref.config_get_token, StaticValue)
        result = ref.config_get_token()
        assert [p.pattern for p in result] == ["^feature bgp$"]

    def test_arguments_ignored(self):
        """Static templates return the same value for any arguments."""
        ref = CommandRef("feature", "bgp", {"config_set": "feature bgp"})
        assert ref.config_set("x", y=1) == ["feature bgp"]


class TestFieldAccess:
    """Tests for reading fields off an entry."""

    def test_plain_fields(self):
        """Non-template fields read back as values."""
        ref = CommandRef("tacacs_server_host", "port", {
            "config_get": "show run tacacs all",
            "default_value": 49,
        })

        assert ref.config_get == "show run tacacs all"
        assert ref.default_value == 49
        assert ref["default_value"] == 49
        assert ref.get("config_get") == "show run tacacs all"

    def test_regex_field(self):
        """Any field may hold a regex."""
        ref = CommandRef("f", "n", {"test_config_get_regex": "/^feature (\\S+)/"})
        assert isinstance(ref.test_config_get_regex, re.Pattern)

    def test_missing_field(self):
        """Reading an undefined field fails lazily."""
        ref = CommandRef("tacacs_server_host", "hosts", {"default_value": ""})

        with pytest.raises(ResolutionError) as exc:
            ref.config_set

        assert "No config_set defined for tacacs_server_host, hosts" in str(exc.value)
        assert isinstance(exc.value, LookupError)

    def test_unknown_attribute(self):
        """Names that aren't fields are plain attribute errors."""
        ref = CommandRef("f", "n", {})
        with pytest.raises(AttributeError):
            ref.get_value

    def test_presence_predicate(self):
        """'field?' reports presence instead of failing."""
        ref = CommandRef("f", "n", {"config_set": "feature bgp", "default_value": None})

        assert ref.get("config_set?") is True
        assert ref.get("config_get?") is False
        assert ref.get("default_value?") is False
        assert ref.has("config_set")

    def test_explicit_nil_default(self):
        """An explicit nil default_value is kept."""
        ref = CommandRef("f", "n", {"default_value": None})

        assert ref.default_value is None
        assert "default_value" in ref.values

    def test_nil_field_unset(self):
        """Other nil fields are treated as absent."""
        ref = CommandRef("f", "n", {"config_get": None, "config_set": None})

        assert "config_get" not in ref.values
        with pytest.raises(ResolutionError):
            ref.config_get
        with pytest.raises(ResolutionError):
            ref.config_set

    def test_read_only(self):
        """Entries can't be changed after construction."""
        ref = CommandRef("f", "n", {"default_value": 1})

        with pytest.raises(AttributeError):
            ref.default_value = 2
        with pytest.raises(TypeError):
            ref.values["default_value"] = 2

    def test_returned_values_are_copies(self):
        """Changing a value read off an entry leaves the entry unchanged."""
        ref = CommandRef("feature", "bgp", {
            "config_set": "feature bgp",
            "default_value": ["a", "b"],
            "test_config_result": {5: 5},
        })

        ref.config_set().append("no feature bgp")
        ref.default_value.append("c")
        ref.get("test_config_result")[7] = 7

        assert ref.config_set() == ["feature bgp"]
        assert ref.default_value == ["a", "b"]
        assert 7 not in ref.get("test_config_result")
        with pytest.raises(AttributeError):
            ref.values["default_value"].append("c")
        with pytest.raises(TypeError):
            ref.values["test_config_result"][7] = 7


class TestConstruction:
    """Tests for building entries."""

    def test_non_mapping(self):
        """Values must be a mapping."""
        with pytest.raises(ConstructionError):
            CommandRef("f", "n", ["config_set"])

    def test_unrecognized_key(self):
        """Unknown keys are rejected."""
        with pytest.raises(LoadError) as exc:
            CommandRef("f", "n", {"set_value": "x"}, "f.yaml")
        assert "Unrecognized key set_value for f, n in f.yaml" in str(exc.value)

    def test_valid(self):
        """An entry is valid when it knows feature and name."""
        assert CommandRef("f", "n", {}).valid()
        assert not CommandRef("", "n", {}).valid()

    def test_str(self):
        """The diagnostic rendering lists every field."""
        ref = CommandRef("tacacs_server_host", "port", {
            "config_get": "show run tacacs all",
            "default_value": 49,
        })

        text = str(ref)

        assert text.startswith("Command: tacacs_server_host port\n")
        assert "  config_get: show run tacacs all\n" in text
        assert "  default_value: 49\n" in text


class TestTestConfigResult:
    """Tests for test_config_result lookups."""

    REF = CommandRef("tacacs_server_host", "timeout", {
        "test_config_result": {-1: "RuntimeError", 5: 5},
    })

    def test_plain_result(self):
        """Results are returned as stored."""
        assert self.REF.test_config_result(5) == 5
        assert self.REF.test_config_result(-1) == "RuntimeError"

    def test_legacy_constants(self):
        """An injected mapping resolves legacy string results."""
        result = self.REF.test_config_result(-1, {"RuntimeError": RuntimeError})
        assert result is RuntimeError

    def test_unknown_value(self):
        """Values without a result fail."""
        with pytest.raises(ResolutionError):
            self.REF.test_config_result(7)
