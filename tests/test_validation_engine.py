"""
Tests for the validation engine pipeline.
"""

import re

import pytest

from validation_class.core.interfaces.directive_interface import Directive
from validation_class.infrastructure.config.environment_config import ValidationSettings
from validation_class.infrastructure.registry.directive_registry import get_default_registry
from validation_class.shared.exceptions.exceptions import (
    ConfigurationError,
    UnknownFieldError,
    UnknownProfileError
)
from validation_class.shared.validation.validation_engine import (
    ValidationEngine,
    parse_selector,
    selector_profile
)


class Even(Directive):
    """Test directive accepting even numbers only."""

    name = "even"
    mixin = True
    field = True
    message = "%s must be even"
    dependencies = {"validation": ["required"]}

    def validate(self, engine, field, param):
        if not field.get("even") or param in (None, ""):
            return True
        if int(param) % 2 == 0:
            return True
        return self.error(engine, field)


class TestBasicValidation:
    """Test suite for single-field checks."""

    def test_max_length_passes_then_fails_after_redeclaration(self, make_engine):
        """Test that redeclaring a field takes effect on the next run."""
        engine = make_engine(fields={"foobar": {"max_length": 5}}, params={"foobar": "apple"})
        assert engine.validate("foobar")

        engine.add_field("foobar", {"max_length": 4})
        assert not engine.validate("foobar")
        assert engine.get_errors() == ["foobar must not contain more than 4 characters"]

    def test_matches_reports_the_other_field(self, make_engine):
        engine = make_engine(
            fields={"password": {"matches": "password2"}, "password2": {}},
            params={"password": "secret", "password2": "secrets"}
        )
        assert not engine.validate()
        assert engine.get_errors() == ["password does not match password2"]

    def test_matches_uses_labels(self, make_engine):
        engine = make_engine(
            fields={
                "password": {"matches": "password2"},
                "password2": {"label": "Password confirmation"}
            },
            params={"password": "a", "password2": "b"}
        )
        engine.validate("password")
        assert engine.get_errors() == ["password does not match Password confirmation"]

    def test_required_failure_stops_other_checks(self, make_engine):
        """Test that a required failure is the only message for the field."""
        engine = make_engine(
            fields={"name": {"required": 1, "min_length": 5}},
            params={"name": ""}
        )
        assert not engine.validate()
        assert engine.get_errors() == ["name is required"]
        assert engine.error_count == 1

    def test_optional_blank_field_passes(self, make_engine):
        engine = make_engine(fields={"nick": {"min_length": 5}}, params={"nick": ""})
        assert engine.validate()

    def test_fields_without_params_are_all_validated(self, make_engine):
        engine = make_engine(fields={"a": {"required": 1}, "b": {"required": 1}})
        assert not engine.validate()
        assert engine.get_errors() == ["a is required", "b is required"]

    def test_error_override_replaces_every_message(self, make_engine):
        engine = make_engine(
            fields={"code": {"error": "Bad code", "min_length": 10, "pattern": "###"}},
            params={"code": "ab"}
        )
        assert not engine.validate()
        assert engine.get_errors() == ["Bad code"]
        assert engine.error_fields() == {"code": ["Bad code"]}

    def test_label_is_used_in_messages(self, make_engine):
        engine = make_engine(fields={"email": {"label": "E-mail   address", "required": 1}})
        engine.validate()
        assert engine.get_errors() == ["E-mail address is required"]


class TestMessages:
    """Test suite for message template precedence."""

    def test_engine_messages_replace_defaults(self, make_engine):
        engine = make_engine(fields={"name": {"required": 1}}, messages={"required": "%s missing"})
        engine.validate()
        assert engine.get_errors() == ["name missing"]

    def test_field_messages_win_over_engine_messages(self, make_engine):
        engine = make_engine(
            fields={"name": {"required": 1, "messages": {"required": "Need %s"}}},
            messages={"required": "%s missing"}
        )
        engine.validate()
        assert engine.get_errors() == ["Need name"]

    def test_errors_mapping_acts_as_templates(self, make_engine):
        engine = make_engine(
            fields={"pin": {"length": 4, "errors": {"length": "%s needs %s digits"}}},
            params={"pin": "12"}
        )
        engine.validate()
        assert engine.get_errors() == ["pin needs 4 digits"]

    def test_errors_string_acts_as_error(self, make_engine):
        engine = make_engine(
            fields={"pin": {"length": 4, "errors": "Wrong PIN"}},
            params={"pin": "12"}
        )
        engine.validate()
        assert engine.get_errors() == ["Wrong PIN"]

    def test_message_order_ignores_declaration_order(self, make_engine):
        first = make_engine(fields={"code": {"pattern": "###", "min_length": 5}}, params={"code": "ab"})
        second = make_engine(fields={"code": {"min_length": 5, "pattern": "###"}}, params={"code": "ab"})
        assert not first.validate()
        assert not second.validate()
        assert first.get_errors() == second.get_errors() == [
            "code must not contain less than 5 characters",
            "code does not match the pattern ###",
        ]


class TestMultipleValues:
    """Test suite for list parameters."""

    def test_each_element_is_validated_separately(self, make_engine):
        engine = make_engine(
            fields={"foo": {"multiples": 1, "max_length": 2}},
            params={"foo": ["a", "bb", "ccc"]}
        )
        assert not engine.validate()

        message = "foo #3 must not contain more than 2 characters"
        assert engine.get_errors() == [message]
        assert engine.error_fields() == {"foo": [message], "foo:2": [message]}
        assert engine.param("foo") == ["a", "bb", "ccc"]
        assert "foo:0" not in engine.fields

    def test_valid_list_passes(self, make_engine):
        engine = make_engine(
            fields={"foo": {"multiples": 1, "max_length": 2}},
            params={"foo": ["a", "bb"]}
        )
        assert engine.validate()
        assert engine.error_fields() == {}

    def test_list_rejected_without_multiples(self, make_engine):
        engine = make_engine(fields={"foo": {"max_length": 2}}, params={"foo": ["a", "b"]})
        assert not engine.validate()
        assert engine.get_errors() == ["foo does not support multiple values"]

    def test_indexed_parameters_are_collected(self, make_engine):
        engine = make_engine(
            fields={"tags": {"multiples": 1, "max_length": 3}},
            params={"tags:0": "ok", "tags:1": "toolong"}
        )
        assert not engine.validate("tags")
        assert "tags:1" in engine.error_fields()
        assert engine.params == {"tags:0": "ok", "tags:1": "toolong"}

    def test_clones_keep_required_from_toggle(self, make_engine):
        engine = make_engine(
            fields={"foo": {"multiples": 1}},
            params={"foo": ["a", ""]}
        )
        assert not engine.validate("+foo")
        assert engine.get_errors() == ["foo #2 is required"]
        assert "required" not in engine.fields["foo"]


class TestUnknownFields:
    """Test suite for the unknown field policy."""

    def test_unknown_field_raises_by_default(self, make_engine):
        engine = make_engine(fields={"a": {}})
        with pytest.raises(UnknownFieldError) as exc_info:
            engine.validate("nope")
        assert "Data validation field nope does not exist" in str(exc_info.value)

    def test_unknown_field_ignored(self, make_engine):
        engine = make_engine(fields={"a": {}}, ignore_unknown=True)
        assert engine.validate("nope")

    def test_unknown_field_reported(self, make_engine):
        engine = make_engine(fields={"a": {}}, ignore_unknown=True, report_unknown=True)
        assert not engine.validate("nope")
        assert engine.get_errors() == ["Data validation field nope does not exist"]

    def test_unknown_submitted_parameter_raises(self, make_engine):
        engine = make_engine(fields={"a": {}}, params={"a": "1", "b": "2"})
        with pytest.raises(UnknownFieldError):
            engine.validate()

    def test_nothing_to_validate(self, make_engine):
        with pytest.raises(UnknownFieldError):
            make_engine().validate()
        assert make_engine(ignore_unknown=True).validate()

    def test_settings_object_drives_policy(self, make_engine):
        settings = ValidationSettings(ignore_unknown=True)
        engine = make_engine(fields={"a": {}}, settings=settings)
        assert engine.validate("nope")


class TestSelectors:
    """Test suite for field selection."""

    def test_regex_selects_in_name_order(self, make_engine):
        engine = make_engine(
            fields={"a_two": {"required": 1}, "b": {"required": 1}, "a_one": {"required": 1}}
        )
        assert not engine.validate(re.compile(r"^a_"))
        assert engine.get_errors() == ["a_one is required", "a_two is required"]

    def test_nested_selector_lists(self, make_engine):
        engine = make_engine(fields={"a": {"required": 1}, "b": {"required": 1}, "c": {}})
        engine.validate(["a", ("b",)])
        assert engine.get_errors() == ["a is required", "b is required"]

    def test_mapping_selector_renames_parameters(self, make_engine):
        engine = make_engine(fields={"email": {"email": 1}}, params={"mail": "bad"})
        assert not engine.validate({"mail": "email"})
        assert engine.get_errors() == ["email requires a valid email address"]
        assert engine.param("mail") == "bad"

    def test_unsupported_selector(self, make_engine):
        engine = make_engine(fields={"a": {}})
        with pytest.raises(ConfigurationError):
            engine.validate(42)

    def test_parse_selector(self):
        assert parse_selector("+name") == "+name"
        assert parse_selector("/^a/").pattern == "^a"

    def test_queue_is_validated_until_cleared(self, make_engine):
        engine = make_engine(
            fields={"login": {"required": 1}, "other": {"required": 1}},
            params={"login": "admin"}
        )
        engine.queue("login", "+other")
        assert not engine.validate()
        assert engine.get_errors() == ["other is required"]
        assert engine.clear_queue() == ["admin", None]
        assert engine.validate()


class TestToggles:
    """Test suite for call-scoped required overrides."""

    def test_plus_forces_required_for_one_call(self, make_engine):
        engine = make_engine(fields={"nickname": {"min_length": 3}})
        assert not engine.validate("+nickname")
        assert engine.get_errors() == ["nickname is required"]

        assert engine.validate("nickname")
        assert "required" not in engine.fields["nickname"]

    def test_minus_makes_field_optional_for_one_call(self, make_engine):
        engine = make_engine(fields={"code": {"required": 1}})
        assert engine.validate("-code")
        assert engine.fields["code"]["required"] == 1
        assert not engine.validate("code")

    def test_declared_toggle(self, make_engine):
        engine = make_engine(fields={"code": {"required": 1, "toggle": "-"}})
        assert engine.validate("code")
        assert engine.fields["code"]["required"] == 1

    def test_override_is_undone_when_a_callback_raises(self, make_engine):
        def explode(engine, field, params):
            raise RuntimeError("lookup failed")

        engine = make_engine(fields={"nick": {"validation": explode}}, params={"nick": "x"})
        with pytest.raises(RuntimeError):
            engine.validate("+nick")
        assert "required" not in engine.fields["nick"]

        engine.params = {}
        assert engine.validate("nick")
        assert engine.get_errors() == []


class TestParameterHandling:
    """Test suite for aliasing, defaults, filters and parameter access."""

    def test_alias_maps_onto_field(self, make_engine):
        engine = make_engine(
            fields={"login": {"alias": ["user"], "min_length": 3}},
            params={"user": "ab"}
        )
        assert not engine.validate("login")
        assert engine.get_errors() == ["login must not contain less than 3 characters"]
        assert engine.params == {"user": "ab"}

    def test_alias_submitted_without_selectors(self, make_engine):
        engine = make_engine(fields={"login": {"alias": "user", "required": 1}}, params={"user": "x"})
        assert engine.validate()

    def test_alias_name_as_selector(self, make_engine):
        engine = make_engine(fields={"login": {"alias": "user", "required": 1}})
        assert not engine.validate("user")
        assert engine.get_errors() == ["login is required"]

    def test_default_is_not_kept(self, make_engine):
        engine = make_engine(fields={"country": {"default": "US", "options": "US, CA"}})
        assert engine.validate()
        assert engine.param("country") is None

    def test_callable_default_receives_engine(self, make_engine):
        engine = make_engine(
            fields={"token": {"default": lambda e: e.stash("token"), "length": 3}},
            stash={"token": "toolong"}
        )
        assert not engine.validate("token")
        assert engine.get_errors() == ["token must contain exactly 3 characters"]

    def test_readonly_discards_submission(self, make_engine):
        engine = make_engine(fields={"id": {"readonly": 1, "required": 1}}, params={"id": "5"})
        assert not engine.validate()
        assert engine.get_errors() == ["id is required"]

    def test_pre_filters_are_rolled_back(self, make_engine):
        engine = make_engine(
            fields={"name": {"filters": ["trim", "uppercase"], "max_length": 3}},
            params={"name": "  abc  "}
        )
        assert engine.validate()
        assert engine.param("name") == "  abc  "

    def test_post_filters_persist_after_success(self, make_engine):
        engine = make_engine(
            fields={"name": {"filters": ["trim", "uppercase"], "filtering": "post", "max_length": 10}},
            params={"name": "  abc  "}
        )
        assert engine.validate()
        assert engine.param("name") == "ABC"

    def test_post_filters_reach_aliased_submissions(self, make_engine):
        engine = make_engine(
            fields={"login": {"alias": "user", "filters": ["uppercase"], "filtering": "post"}},
            params={"user": "abc"}
        )
        assert engine.validate()
        assert engine.params == {"user": "ABC"}

    def test_post_filters_skipped_after_failure(self, make_engine):
        engine = make_engine(
            fields={"name": {"filters": ["trim"], "filtering": "post", "max_length": 2}},
            params={"name": " abc "}
        )
        assert not engine.validate()
        assert engine.param("name") == " abc "

    def test_filtering_switch_applies_to_undeclared_fields(self, make_engine):
        engine = make_engine(
            fields={"name": {"filters": "uppercase"}},
            params={"name": "abc"},
            filtering="post"
        )
        assert engine.validate()
        assert engine.param("name") == "ABC"

    def test_nested_params_are_flattened(self, make_engine):
        engine = make_engine(
            fields={"user.name": {"required": 1}},
            params={"user": {"name": ""}}
        )
        assert not engine.validate()
        assert engine.get_errors() == ["user.name is required"]

    def test_params_hash_round_trip(self, make_engine):
        engine = make_engine()
        flat = engine.set_params_hash({"user": {"name": "x", "tags": ["a", "b"]}})
        assert flat == {"user.name": "x", "user.tags": ["a", "b"]}
        assert engine.get_params_hash() == {"user": {"name": "x", "tags": ["a", "b"]}}

    def test_param_accessors(self, make_engine):
        engine = make_engine(params={"a": 1, "b": 2})
        assert engine.param("a") == 1
        assert engine.param("c", 3) == 3
        assert engine.get_params("a", "c") == [1, 3]
        assert engine.get_params() == [1, 2, 3]


class TestCustomValidation:
    """Test suite for validation callbacks and custom directives."""

    def test_failing_callback_gets_default_message(self, make_engine):
        engine = make_engine(
            fields={"even": {"validation": lambda e, f, p: int(p["even"]) % 2 == 0}},
            params={"even": "3"}
        )
        assert not engine.validate()
        assert engine.get_errors() == ["even did not pass validation"]

    def test_callback_messages_are_kept(self, make_engine):
        def check(engine, field, params):
            field.errors.add("odd numbers are not welcome")
            return False

        engine = make_engine(fields={"even": {"validation": check}}, params={"even": "3"})
        assert not engine.validate()
        assert engine.get_errors() == ["odd numbers are not welcome"]

    def test_callback_skipped_for_blank_values(self, make_engine):
        engine = make_engine(
            fields={"even": {"validation": lambda e, f, p: False}},
            params={"even": ""}
        )
        assert engine.validate()

    def test_custom_directive_stays_on_engine(self, make_engine):
        engine = make_engine(fields={}, params={"n": "3"})
        engine.add_directive(Even())
        engine.add_field("n", {"even": 1})
        assert not engine.validate()
        assert engine.get_errors() == ["n must be even"]
        assert "even" not in get_default_registry()

    def test_depends_on(self, make_engine):
        engine = make_engine(fields={"a": {"depends_on": "b"}, "b": {}}, params={"a": "1"})
        assert not engine.validate("a")
        assert engine.get_errors() == ["a requires b to have a value"]


class TestDeclarations:
    """Test suite for declaration handling."""

    def test_invalid_directive_is_fatal(self, make_engine):
        engine = make_engine(fields={"a": {"bogus": 1}})
        with pytest.raises(ConfigurationError):
            engine.resolve()

    def test_mixins_are_applied(self, make_engine):
        engine = make_engine(
            mixins={"basic": {"required": 1, "max_length": 3}},
            fields={"code": {"mixin": "basic"}},
            params={"code": "abcd"}
        )
        assert not engine.validate()
        assert engine.get_errors() == ["code must not contain more than 3 characters"]
        assert "basic" in engine.mixins

    def test_clone_copies_directives(self, make_engine):
        engine = make_engine(fields={"password": {"min_length": 5, "alias": "pw"}})
        clone = engine.clone("password", "confirm", {"label": "Confirm"})
        assert clone["min_length"] == 5
        assert clone.label == "Confirm"
        assert "alias" not in clone
        with pytest.raises(ConfigurationError):
            engine.clone("missing", "other")

    def test_field_name_cannot_change(self, make_engine):
        engine = make_engine(fields={"a": {}})
        with pytest.raises(ConfigurationError):
            engine.fields["a"]["name"] = "b"


class TestProfiles:
    """Test suite for validation profiles."""

    def test_profile_runs_with_arguments(self, make_engine):
        def signup(engine, minimum):
            engine.fields["login"]["min_length"] = minimum
            return engine.validate("login")

        engine = make_engine(fields={"login": {}}, params={"login": "abc"}, profiles={"signup": signup})
        assert not engine.validate_profile("signup", 5)
        assert engine.validate_profile("signup", 3)

    def test_selector_profile(self, make_engine):
        engine = make_engine(
            fields={"a": {"required": 1}, "b": {"required": 1}},
            profiles={"only_a": selector_profile(["a"])}
        )
        assert not engine.validate_profile("only_a")
        assert engine.get_errors() == ["a is required"]

    def test_unknown_profile(self, make_engine):
        engine = make_engine(fields={"a": {}})
        with pytest.raises(UnknownProfileError):
            engine.validate_profile("missing")

        engine = make_engine(fields={"a": {}}, ignore_unknown=True, report_unknown=True)
        assert not engine.validate_profile("missing")
        assert engine.get_errors() == ["Validation profile missing does not exist"]

    def test_profile_must_be_callable(self, make_engine):
        with pytest.raises(ConfigurationError):
            make_engine(profiles={"bad": "not callable"})


class TestErrorsAndStash:
    """Test suite for error access, reset and the stash."""

    @pytest.fixture
    def failed_engine(self, make_engine):
        engine = make_engine(
            fields={"login": {"required": 1}, "password": {"min_length": 5}},
            params={"password": "abc"}
        )
        engine.validate("password", "login")
        return engine

    def test_get_errors_filters(self, failed_engine):
        assert failed_engine.get_errors("login") == ["login is required"]
        assert failed_engine.get_errors(re.compile("less than")) == [
            "password must not contain less than 5 characters"
        ]
        assert failed_engine.get_errors("unknown") == []

    def test_errors_to_string(self, failed_engine):
        assert failed_engine.errors_to_string() == (
            "password must not contain less than 5 characters, login is required"
        )
        assert failed_engine.errors_to_string("\n", str.upper).startswith("PASSWORD")

    def test_error_fields_restricted_by_name(self, failed_engine):
        assert failed_engine.error_fields("login") == {"login": ["login is required"]}

    def test_reset_clears_errors(self, failed_engine):
        failed_engine.set_errors("custom")
        failed_engine.reset()
        assert failed_engine.error_count == 0
        assert failed_engine.error_fields() == {}

    def test_stash(self, make_engine):
        engine = make_engine(stash={"a": 1})
        assert engine.stash("a") == 1
        assert engine.stash("b", 2) == 2
        engine.stash({"c": 3}, d=4)
        assert engine.stash() == {"a": 1, "b": 2, "c": 3, "d": 4}


class TestLogging:
    """Test suite for engine logging."""

    def test_validation_is_logged(self, make_engine, debug_logger, log_stream):
        engine = make_engine(fields={"a": {}}, params={"a": "x"}, logger=debug_logger)
        engine.validate()
        assert "Validation finished" in log_stream.getvalue()

    def test_reported_unknown_field_is_logged(self, make_engine, debug_logger, log_stream):
        engine = make_engine(
            fields={"a": {}},
            logger=debug_logger,
            ignore_unknown=True,
            report_unknown=True
        )
        engine.validate("nope")
        assert "Data validation field nope does not exist" in log_stream.getvalue()
