import argparse
import statistics
import time

from rolegate import AccessEvaluator, AttributeRegistry, StaticRuleProvider


def gen_rules(depth: int, fanout: int) -> dict:
    """A layered hierarchy: each role inherits every role of the layer below."""
    rules: dict = {}
    for layer in range(depth):
        for i in range(fanout):
            below = [f"r{layer + 1}_{j}" for j in range(fanout)] if layer + 1 < depth else []
            rules[f"r{layer}_{i}"] = {
                "permissions": [f"p{layer}_{i}"],
                "inherited": below,
                "attributes": ["always"] if i == 0 else [],
            }
    return rules


def run(depth: int, fanout: int, iters: int) -> dict:
    t0 = time.perf_counter()
    provider = StaticRuleProvider(gen_rules(depth, fanout))
    compile_ms = (time.perf_counter() - t0) * 1000.0

    attrs: AttributeRegistry[dict] = AttributeRegistry().set("always", lambda ctx: True)
    evaluator = AccessEvaluator(attrs, provider)
    target = f"p{depth - 1}_{fanout - 1}"
    lat = []
    for _ in range(iters):
        t0 = time.perf_counter()
        evaluator.check_sync(["r0_0"], target, {})
        lat.append((time.perf_counter() - t0) * 1000.0)
    return {
        "compile_ms": compile_ms,
        "p50": statistics.median(lat),
        "avg": sum(lat) / len(lat),
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--depth", type=int, default=10)
    ap.add_argument("--fanout", type=int, default=10)
    ap.add_argument("--iters", type=int, default=500)
    args = ap.parse_args()
    res = run(args.depth, args.fanout, args.iters)
    print(
        f"depth={args.depth} fanout={args.fanout} compile={res['compile_ms']:.2f}ms "
        f"p50={res['p50']:.3f}ms avg={res['avg']:.3f}ms"
    )


if __name__ == "__main__":
    main()
