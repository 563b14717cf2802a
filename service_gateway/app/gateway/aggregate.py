"""
Concurrent sub-queries that tolerate individual provider failures.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, List

from shared.errors import ClassifiedError
from shared.logging import get_logger


logger = get_logger("gateway.aggregate")


@dataclass
class SubQuery:
    """One labelled call in an aggregate and the value used if it fails."""

    label: str
    call: Awaitable[Any]
    fallback: Any = None


async def gather_tolerant(*queries: SubQuery) -> List[Any]:
    """Run ``queries`` concurrently and return their results in order.

    A query failing with ``ClassifiedError`` is logged and replaced by its
    fallback. Any other exception is a bug and propagates.
    """
    outcomes = await asyncio.gather(*(query.call for query in queries), return_exceptions=True)

    results: List[Any] = []
    for query, outcome in zip(queries, outcomes):
        if isinstance(outcome, ClassifiedError):
            logger.warning(
                "Sub-query failed, degrading to fallback",
                label=query.label,
                kind=outcome.kind.value,
                provider=outcome.provider,
                error=outcome.message,
            )
            results.append(query.fallback)
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append(outcome)
    return results
