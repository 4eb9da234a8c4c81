# ABOUTME: Stand-in for the expensive generative call behind the response cache
# ABOUTME: Waits a configurable delay and returns a templated summary of the query

import asyncio
from typing import Awaitable, Callable


class SimulatedGenerator:
    """Simulated answer generator with a fixed delay."""

    def __init__(self, delay: float = 1.2):
        """Initialize generator with its simulated latency in seconds."""
        if delay < 0:
            raise ValueError("Generation delay must not be negative")
        self.delay = delay
        self.calls = 0

    async def generate(self, query: str) -> str:
        self.calls += 1
        await asyncio.sleep(self.delay)
        return f"Summary of document: {query}"

    def for_query(self, query: str) -> Callable[[], Awaitable[str]]:
        """Bind a query into a zero-argument computation."""

        async def compute() -> str:
            return await self.generate(query)

        return compute
