import importlib.util
import json

import pytest


def _has_module(modname: str) -> bool:
    return importlib.util.find_spec(modname) is not None


def pytest_collection_modifyitems(config, items):
    """Skip schema-validation tests without jsonschema and YAML tests without PyYAML."""
    missing_jsonschema = not _has_module("jsonschema")
    missing_yaml = not _has_module("yaml")
    if not (missing_jsonschema or missing_yaml):
        return

    skip_validate = pytest.mark.skip(reason="optional dependency 'jsonschema' not installed")
    skip_yaml = pytest.mark.skip(reason="optional dependency 'PyYAML' not installed")
    for item in items:
        nid = item.nodeid
        if missing_jsonschema and "schema" in nid:
            item.add_marker(skip_validate)
        if missing_yaml and "yaml" in nid.lower():
            item.add_marker(skip_yaml)


@pytest.fixture
def rules_file(tmp_path, sample_rules):
    p = tmp_path / "rules.json"
    p.write_text(json.dumps(sample_rules), encoding="utf-8")
    return str(p)
