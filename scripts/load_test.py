"""Async load generator for the checkout form submission endpoint.

Run against a portal started with `PROVIDER_BACKEND=simulated`; a share of
customers is named `force-decline...` to exercise the failure path.
"""

import argparse
import asyncio
import random
import statistics
import time
from collections import Counter

import httpx


def build_form(idx: int, decline_ratio: float) -> dict[str, str]:
    """One checkout submission; every tenth one uses Orange Money."""

    orange = idx % 10 == 0
    form = {
        "firstName": "force-decline" if random.random() < decline_ratio else f"Customer{idx}",
        "lastName": "Load",
        "phoneNumber": f"+22177{random.randint(1_000_000, 9_999_999)}",
        "paymentMethod": "ORANGE_MONEY" if orange else "WAVE",
        "amount": str(random.randint(100, 250_000)),
        "productName": "Load Test Product",
    }
    if orange:
        form["authorizationCode"] = str(random.randint(100_000, 999_999))
    return form


async def send_one(client: httpx.AsyncClient, form: dict[str, str]) -> tuple[int, float]:
    """Post one form; transport failures are counted as status 599."""

    t0 = time.perf_counter()
    try:
        status = (await client.post("/payment/process", data=form, follow_redirects=False)).status_code
    except httpx.HTTPError:
        status = 599
    return status, (time.perf_counter() - t0) * 1000


def percentile(values: list[float], p: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    return ordered[min(len(ordered) - 1, max(0, int(p / 100.0 * len(ordered)) - 1))]


def summarize(label: str, samples: list[tuple[int, float]]) -> None:
    codes = Counter(code for code, _ in samples)
    latencies = [ms for _, ms in samples]
    initiated = codes[302] + codes[200]
    print(
        f"[{label}] n={len(samples)} initiated={initiated} codes={dict(sorted(codes.items()))} "
        f"p50={percentile(latencies, 50):.1f}ms p95={percentile(latencies, 95):.1f}ms "
        f"p99={percentile(latencies, 99):.1f}ms mean={statistics.fmean(latencies) if latencies else 0.0:.1f}ms"
    )


async def run(total: int, concurrency: int, base_url: str, decline_ratio: float):
    """Submit `total` forms with at most `concurrency` in flight, then report per payment method."""

    gate = asyncio.Semaphore(concurrency)
    by_method: dict[str, list[tuple[int, float]]] = {"WAVE": [], "ORANGE_MONEY": []}

    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:

        async def submit(idx: int):
            form = build_form(idx, decline_ratio)
            async with gate:
                by_method[form["paymentMethod"]].append(await send_one(client, form))

        await asyncio.gather(*(submit(idx) for idx in range(total)))

    for method, samples in by_method.items():
        summarize(method, samples)
    summarize("ALL", [s for samples in by_method.values() for s in samples])


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Load the checkout form endpoint")
    parser.add_argument("-n", "--total", type=int, default=500)
    parser.add_argument("-c", "--concurrency", type=int, default=50)
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--decline-ratio", type=float, default=0.1)
    opts = parser.parse_args()
    asyncio.run(run(opts.total, opts.concurrency, opts.base_url, opts.decline_ratio))
