"""
Async Helper Utilities
Concurrent fan-out/fan-in where one failing branch must not cancel the others
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Dict, Generic, Hashable, Mapping, TypeVar

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


@dataclass
class Settled(Generic[K, T]):
    """Outcome of gather_settled: successes and failures kept apart"""
    successes: Dict[K, T] = field(default_factory=dict)
    failures: Dict[K, Exception] = field(default_factory=dict)

    @property
    def all_succeeded(self) -> bool:
        return not self.failures


async def gather_settled(awaitables: Mapping[K, Awaitable[T]]) -> Settled[K, T]:
    """
    Await all awaitables concurrently and settle each one.

    Args:
        awaitables: Mapping of key -> awaitable

    Returns:
        Settled with each key in exactly one of successes / failures.
        Cancellation and other BaseExceptions are re-raised.

    Example:
        >>> settled = await gather_settled({"jets": fetch_jets(), "yachts": fetch_yachts()})
        >>> settled.successes.get("jets", [])
    """
    keys = list(awaitables.keys())
    results = await asyncio.gather(*awaitables.values(), return_exceptions=True)

    settled: Settled[K, T] = Settled()
    for key, result in zip(keys, results):
        if isinstance(result, Exception):
            settled.failures[key] = result
        elif isinstance(result, BaseException):
            raise result
        else:
            settled.successes[key] = result
    return settled
