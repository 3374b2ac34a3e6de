"""Tests for Perspective registration and lookup."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from screenplay.core.actions import task
from screenplay.core.errors import ConfigurationError, ErrorCode, HandlerNotFoundError
from screenplay.core.perspective import Perspective


class TestRegistration:
    """Tests for register()."""

    def test_definition_runs_once_with_register(self) -> None:
        definition = MagicMock()
        perspective = Perspective("web", definition)
        definition.assert_called_once_with(perspective.register)

    def test_register_and_resolve(self) -> None:
        sign_up = task("SignUp")
        handler = MagicMock()
        perspective = Perspective("web", lambda register: register(sign_up, lambda params: handler))
        assert perspective.handler_for(sign_up()) is handler
        assert "SignUp" in perspective
        assert len(perspective) == 1

    def test_handler_factory_receives_parameters(self) -> None:
        sign_up = task("SignUp", build_children=lambda define: define("as", ["name"]))
        factory = MagicMock(return_value="handler")
        perspective = Perspective("web", lambda register: register(sign_up.child("as"), factory))
        perspective.handler_for(sign_up.child("as")("dave@example.com"))
        factory.assert_called_once()
        assert dict(factory.call_args.args[0]) == {"name": "dave@example.com"}

    def test_register_accepts_plain_identifiers(self) -> None:
        perspective = Perspective("web")
        perspective.register("SignUp.as", lambda params: "by string")
        perspective.register(SimpleNamespace(identifier="LogIn"), lambda params: "by attribute")
        sign_up = task("SignUp", build_children=lambda define: define("as", ["name"]))
        assert perspective.handler_for(sign_up.child("as")("x")) == "by string"
        assert perspective.handler_for(task("LogIn")()) == "by attribute"

    def test_last_registration_wins(self) -> None:
        sign_up = task("SignUp")

        def define(register):
            register(sign_up, lambda params: "first")
            register(sign_up, lambda params: "second")

        perspective = Perspective("web", define)
        assert perspective.handler_for(sign_up) == "second"
        assert perspective.identifiers == ["SignUp"]

    def test_register_none_names_call_site(self) -> None:
        perspective = Perspective("web")
        with pytest.raises(ConfigurationError) as exc_info:
            perspective.register(None, lambda params: None)
        assert "test_perspective.py" in str(exc_info.value)
        assert exc_info.value.code == ErrorCode.MISSING_IDENTIFIER
        assert exc_info.value.details["perspective"] == "web"

    def test_register_without_identifier_fails(self) -> None:
        with pytest.raises(ConfigurationError, match="has no identifier"):
            Perspective("web", lambda register: register(object(), lambda params: None))

    def test_register_empty_identifier_fails(self) -> None:
        with pytest.raises(ConfigurationError):
            Perspective("web").register("", lambda params: None)


class TestLookup:
    """Tests for handler_for() failures."""

    def test_unknown_identifier_lists_alternatives(self) -> None:
        def define(register):
            register("SignUp", lambda params: None)
            register("LogIn", lambda params: None)

        perspective = Perspective("web browser", define)
        with pytest.raises(HandlerNotFoundError) as exc_info:
            perspective.handler_for(task("SignUpp")())
        message = str(exc_info.value)
        assert "No handler found for task 'SignUpp' in 'web browser' perspective" in message
        assert "- SignUp" in message
        assert "- LogIn" in message
        assert exc_info.value.alternatives == ["SignUp", "LogIn"]

    def test_empty_perspective_says_so(self) -> None:
        with pytest.raises(HandlerNotFoundError, match="No handlers registered."):
            Perspective("Perspective").handler_for(task("DoSomething")())

    def test_lookup_error_is_a_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            Perspective().handler_for(task("DoSomething")())

    def test_factory_is_invoked_for_lookup(self) -> None:
        sign_up = task("SignUp")
        perspective = Perspective("web", lambda register: register(sign_up, lambda params: dict(params)))
        assert perspective.handler_for(sign_up) == {}
