import dataclasses

import pytest

from rolegate.core.errors import RuleTableError
from rolegate.core.model import Decision, RoleDefinition, build_rule_table


def test_role_definition_defaults_and_frozen():
    r = RoleDefinition()
    assert r.permissions == () and r.inherited == () and r.attributes == ()
    with pytest.raises(dataclasses.FrozenInstanceError):
        r.permissions = ("x",)  # type: ignore[misc]


def test_from_dict_missing_keys_default_empty():
    r = RoleDefinition.from_dict("reader", {"permissions": ["read"]})
    assert r == RoleDefinition(permissions=("read",))
    assert RoleDefinition.from_dict("empty", None) == RoleDefinition()


def test_from_dict_collapses_duplicates_keeping_order():
    r = RoleDefinition.from_dict("r", {"inherited": ["b", "a", "b"]})
    assert r.inherited == ("b", "a")


@pytest.mark.parametrize(
    "data",
    [
        {"permissions": "read"},
        {"permissions": [1]},
        {"inherited": [""]},
        {"attributes": {"x": True}},
        {"extends": ["user"]},
        ["read"],
    ],
)
def test_from_dict_rejects_malformed(data):
    with pytest.raises(RuleTableError):
        RoleDefinition.from_dict("bad", data)


def test_build_rule_table_accepts_definitions_and_dicts():
    table = build_rule_table({"a": RoleDefinition(permissions=("x",)), "b": {"inherited": ["a"]}})
    assert table["a"].permissions == ("x",)
    assert table["b"].inherited == ("a",)


def test_build_rule_table_rejects_non_mapping_and_bad_names():
    with pytest.raises(RuleTableError):
        build_rule_table(["a"])  # type: ignore[arg-type]
    with pytest.raises(RuleTableError):
        build_rule_table({"": {}})


def test_rule_table_error_is_value_error():
    assert issubclass(RuleTableError, ValueError)


def test_to_dict_roundtrips_shape():
    r = RoleDefinition(permissions=("read",), inherited=("user",), attributes=("a",))
    assert RoleDefinition.from_dict("r", r.to_dict()) == r


def test_decision_effect():
    assert Decision(True, "read", "granted").effect == "allow"
    assert Decision(False, "read", "not_granted").effect == "deny"
    assert Decision(False, "read", "error", error=RuntimeError("x")).effect == "error"


@pytest.mark.parametrize("perms", [{"write", "read"}, frozenset({"write", "read"})])
def test_from_dict_accepts_permission_sets(perms):
    r = RoleDefinition.from_dict("writer", {"permissions": perms, "inherited": ["reader"]})
    assert r.permissions == ("read", "write")
    assert r.inherited == ("reader",)


@pytest.mark.parametrize(
    "data,message",
    [
        ({"inherited": {"reader"}}, "ordered list or tuple"),
        ({"attributes": frozenset({"dailySchedule"})}, "ordered list or tuple"),
        ({"permissions": {"read", 1}}, "non-empty strings"),
        ({"permissions": {"read": True}}, "list, tuple or set"),
    ],
)
def test_from_dict_keeps_ordered_keys_strict(data, message):
    with pytest.raises(RuleTableError, match=message):
        RoleDefinition.from_dict("bad", data)
