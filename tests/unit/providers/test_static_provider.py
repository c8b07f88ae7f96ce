import json

import pytest

from rolegate.core.errors import RuleTableError, UnknownRoleError
from rolegate.core.ports import RuleProvider
from rolegate.providers import JsonRuleProvider, StaticRuleProvider


def test_is_a_rule_provider(sample_rules):
    p = StaticRuleProvider(sample_rules)
    assert isinstance(p, RuleProvider)
    assert JsonRuleProvider is StaticRuleProvider


def test_direct_permissions_and_attributes(sample_rules):
    p = StaticRuleProvider(sample_rules)
    assert p.get_permissions("writer") == ["create"]
    assert p.get_attributes("writer") == ["asyncAttribute"]
    assert p.get_attributes("reader") == []


def test_unknown_role_lookups_are_empty_not_errors(sample_rules):
    p = StaticRuleProvider(sample_rules)
    assert p.get_permissions("ghost") == []
    assert p.get_attributes("ghost") == []
    assert p.get_inherited_permissions("ghost") == []


def test_get_user_roles_prepends_self(sample_rules):
    p = StaticRuleProvider(sample_rules)
    assert p.get_user_roles(["writer", "user"]) == {
        "writer": ["writer", "reader", "user"],
        "user": ["user"],
    }
    assert p.get_user_roles([]) == {}


def test_get_user_roles_unknown_role_raises(sample_rules):
    p = StaticRuleProvider(sample_rules)
    with pytest.raises(UnknownRoleError) as ei:
        p.get_user_roles(["reader", "ghost"])
    assert ei.value.missing == "ghost" and ei.value.role is None


def test_inheritance_map_is_a_copy(sample_rules):
    p = StaticRuleProvider(sample_rules)
    m = p.get_inheritance_map()
    assert m["admin"] == ["director", "reader", "user", "editor"]
    m["admin"].append("tampered")
    m["new"] = []
    assert p.get_inheritance_map()["admin"] == ["director", "reader", "user", "editor"]
    assert "new" not in p.get_inheritance_map()


def test_construction_fails_fast_on_unknown_parent():
    with pytest.raises(UnknownRoleError):
        StaticRuleProvider({"reader": {"inherited": ["user"]}})


def test_construction_fails_on_malformed_rules():
    with pytest.raises(RuleTableError):
        StaticRuleProvider({"reader": {"permissions": "read"}})


def test_source_mapping_changes_do_not_leak_in(sample_rules):
    p = StaticRuleProvider(sample_rules)
    sample_rules["reader"]["permissions"].append("write")
    sample_rules["intruder"] = {"permissions": ["all"]}
    assert p.get_permissions("reader") == ["read"]
    assert "intruder" not in p
    with pytest.raises(TypeError):
        p.rules["x"] = None  # type: ignore[index]


def test_inherited_permissions_and_attributes(sample_rules):
    p = StaticRuleProvider(sample_rules)
    assert p.get_inherited_permissions("writer") == ["create", "read", "exist"]
    assert p.get_inherited_attributes("admin") == ["hasSuperPrivilege", "dailySchedule"]


def test_container_helpers(sample_rules):
    p = StaticRuleProvider(sample_rules)
    assert len(p) == 6
    assert "admin" in p and "ghost" not in p
    assert list(p) == list(sample_rules)
    assert p.roles == tuple(sample_rules)
    assert p.get_role("reader").permissions == ("read",)
    assert p.get_role("ghost") is None


def test_from_file_json(tmp_path, sample_rules):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps(sample_rules), encoding="utf-8")
    p = StaticRuleProvider.from_file(str(path))
    assert p.get_user_roles(["reader"]) == {"reader": ["reader", "user"]}


def test_from_text_yaml():
    pytest.importorskip("yaml")
    text = "user:\n  permissions: [exist]\nreader:\n  permissions: [read]\n  inherited: [user]\n"
    p = StaticRuleProvider.from_text(text, filename="rules.yaml")
    assert p.get_inherited_permissions("reader") == ["read", "exist"]


def test_from_text_with_schema_validation_rejects_bad_doc():
    jsonschema = pytest.importorskip("jsonschema")
    with pytest.raises(jsonschema.ValidationError):
        StaticRuleProvider.from_text('{"a": {"permissions": [1]}}', validate_schema=True)


class LazyProvider(RuleProvider):
    def get_permissions(self, role):
        return ["read"] if role == "reader" else []

    def get_attributes(self, role):
        return []

    def get_user_roles(self, roles):
        return {r: [r] for r in roles}


def test_inheritance_map_is_optional_for_providers():
    p = LazyProvider()
    assert p.get_permissions("reader") == ["read"]
    with pytest.raises(NotImplementedError, match="LazyProvider"):
        p.get_inheritance_map()
