import asyncio

import pytest

SAMPLE_RULES = {
    "user": {"inherited": [], "permissions": ["exist"]},
    "reader": {"permissions": ["read"], "inherited": ["user"]},
    "writer": {"permissions": ["create"], "inherited": ["reader"], "attributes": ["asyncAttribute"]},
    "editor": {"permissions": ["update"], "inherited": ["reader"], "attributes": ["dailySchedule"]},
    "director": {"permissions": ["delete"], "inherited": ["reader", "editor"]},
    "admin": {"permissions": ["manage"], "inherited": ["director"], "attributes": ["hasSuperPrivilege"]},
}


@pytest.fixture
def sample_rules():
    # deep-ish copy so tests may mutate freely
    return {k: {kk: list(vv) for kk, vv in v.items()} for k, v in SAMPLE_RULES.items()}


@pytest.fixture
def sample_registry():
    from rolegate import AttributeRegistry

    async def async_attribute(ctx):
        await asyncio.sleep(0)
        return True

    reg = AttributeRegistry()
    reg.set("hasSuperPrivilege", lambda ctx: ctx.get("message") == "super")
    reg.set("dailySchedule", lambda ctx: bool(ctx.get("office_hours", True)))
    reg.set("asyncAttribute", async_attribute)
    return reg
