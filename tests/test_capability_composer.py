from __future__ import annotations

from typing import Protocol

import pytest

from ppm_core.capabilities import CapabilityComposer, SourceRequest, compose, interface_operations
from ppm_core.errors import CapabilityConfigurationError


class _Ops(Protocol):
    def first(self) -> str: ...

    def second(self, value: str) -> str: ...

    def third(self) -> str: ...


class _Base:
    def first(self) -> str:
        return "base-first"

    def second(self, value: str) -> str:
        return f"base-second:{value}"

    def third(self) -> str:
        return "base-third"


class _OverridesFirst:
    def first(self) -> str:
        return "a-first"


class _OverridesSecond:
    def second(self, value: str) -> str:
        return f"b-second:{value}"


def test_interface_operations_report_arity() -> None:
    assert interface_operations(_Ops) == {"first": 0, "second": 1, "third": 0}


def test_first_supplier_wins_per_operation() -> None:
    base = _Base()
    a = _OverridesFirst()
    b = _OverridesSecond()

    composite = compose(_Ops, a, b, base)

    assert composite.first() == "a-first"
    assert composite.second("x") == "b-second:x"
    assert composite.third() == "base-third"
    assert composite.implementation_of("first") is a
    assert composite.implementation_of("second") is b
    assert composite.implementation_of("third") is base


def test_order_decides_precedence() -> None:
    class _AlsoFirst:
        def first(self) -> str:
            return "b-first"

    composite = compose(_Ops, _AlsoFirst(), _OverridesFirst(), _Base())
    assert composite.first() == "b-first"


def test_mapping_overrides_supply_named_operations() -> None:
    composite = compose(_Ops, {"third": lambda: "mapped-third"}, _Base())
    assert composite.third() == "mapped-third"
    assert composite.first() == "base-first"


def test_incompatible_signature_is_skipped() -> None:
    class _WrongArity:
        def second(self) -> str:
            return "never"

        def first(self, extra: str) -> str:
            return "never"

    composite = compose(_Ops, _WrongArity(), _Base())
    assert composite.second("y") == "base-second:y"
    assert composite.first() == "base-first"


def test_non_callable_member_is_skipped() -> None:
    class _Attribute:
        first = "not callable"

    composite = compose(_Ops, _Attribute(), _Base())
    assert composite.first() == "base-first"


def test_lookup_table_is_fixed_at_construction() -> None:
    override = _OverridesFirst()
    composite = compose(_Ops, override, _Base())

    override.first = lambda: "patched"  # type: ignore[method-assign]

    assert composite.first() == "a-first"


def test_missing_operation_fails_at_construction() -> None:
    with pytest.raises(CapabilityConfigurationError) as excinfo:
        compose(_Ops, _OverridesFirst(), _OverridesSecond())

    assert excinfo.value.missing == ("third",)
    assert "third" in str(excinfo.value)


def test_none_entries_are_ignored() -> None:
    composite = compose(_Ops, None, _Base())
    assert composite.first() == "base-first"


def test_interface_without_operations_is_rejected() -> None:
    class _Empty(Protocol):
        pass

    with pytest.raises(CapabilityConfigurationError):
        CapabilityComposer(_Empty)


def test_unknown_operation_in_implementation_of() -> None:
    composite = compose(_Ops, _Base())
    with pytest.raises(KeyError):
        composite.implementation_of("fourth")


def test_source_request_satisfies_host_request() -> None:
    from ppm_core.capabilities import HostRequest

    request = SourceRequest({"Destination": "c:/tmp", "Tags": ["a", "b"]})
    composite = compose(HostRequest, request)

    assert list(composite.get_option_keys()) == ["Destination", "Tags"]
    assert list(composite.get_option_values("tags")) == ["a", "b"]
    assert list(composite.get_option_values("missing")) == []
    assert composite.is_cancelled() is False
    request.cancel()
    assert composite.is_cancelled() is True


def test_operation_names_reserved_by_the_composite_are_rejected() -> None:
    class _Colliding(Protocol):
        def interface(self) -> str: ...

        def implementation_of(self, operation: str) -> str: ...

        def other(self) -> str: ...

    with pytest.raises(CapabilityConfigurationError) as excinfo:
        CapabilityComposer(_Colliding)

    assert excinfo.value.reserved == ("interface", "implementation_of")
    assert "interface" in str(excinfo.value)
