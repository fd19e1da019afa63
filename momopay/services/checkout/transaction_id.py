"""Correlation identifiers for checkout attempts."""

import random
import time

RANDOM_BOUND = 10_000


def generate_transaction_id() -> str:
    """Return `TXN-<epoch ms>-<random int in [0, 10000)>`.

    No registry is kept: uniqueness is probabilistic, which is enough for an
    id used to correlate logs and provider calls.
    """

    return f"TXN-{time.time_ns() // 1_000_000}-{random.randrange(RANDOM_BOUND)}"
