import asyncio
from datetime import datetime

from rolegate import AccessEvaluator, AttributeRegistry, StaticRuleProvider

RULES = {
    "user": {"inherited": [], "permissions": ["exist"]},
    "reader": {"permissions": ["read"], "inherited": ["user"]},
    "writer": {"permissions": ["create"], "inherited": ["reader"], "attributes": ["asyncAttribute"]},
    "editor": {"permissions": ["update"], "inherited": ["reader"], "attributes": ["dailySchedule"]},
    "director": {"permissions": ["delete"], "inherited": ["reader", "editor"]},
    "admin": {"permissions": ["manage"], "inherited": ["director"], "attributes": ["hasSuperPrivilege"]},
}


async def async_attribute(ctx: dict) -> bool:
    await asyncio.sleep(0.1)  # e.g. a lookup in another service
    return True


def build() -> AccessEvaluator[dict]:
    attrs: AttributeRegistry[dict] = AttributeRegistry()
    attrs.set("hasSuperPrivilege", lambda ctx: ctx.get("message") == "super")
    attrs.set("dailySchedule", lambda ctx: 9 <= datetime.now().hour < 18)
    attrs.set("asyncAttribute", async_attribute)
    return AccessEvaluator(attrs, StaticRuleProvider(RULES), error_listeners=[print])


async def main() -> None:
    rbac = build()
    ctx = {"message": "super"}
    print(await rbac.check(["writer"], "read", ctx))  # True, inherited from reader
    print(await rbac.check(["writer"], "manage", ctx))  # False, admin is not inherited
    print(await rbac.check(["ghost"], "read", ctx))  # False, error goes to the listener


if __name__ == "__main__":
    asyncio.run(main())
