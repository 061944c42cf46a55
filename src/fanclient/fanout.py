# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Fan-out of one request over many URLs.

Sequential runs stop at the first failure and raise it. Concurrent runs start one thread per
URL, join them all, and never raise per-URL dispatch errors: failed URLs are reported through
DispatchResult (or logged and dropped by `collect_responses`).

No worker writes to a shared container. Each URL owns its own future, and results are
gathered by the calling thread after the join, either by input index or by a single
`as_completed` loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from enum import Enum

from .errors import DispatchError
from .http.models import DispatchResult, Response

logger = logging.getLogger(__name__)

Dispatch = Callable[[str], Response]


class FanoutOrder(str, Enum):
    """Ordering of concurrent fan-out results."""

    INPUT = "input"
    COMPLETION = "completion"


def _run_unit(dispatch: Dispatch, index: int, url: str) -> DispatchResult:
    try:
        return DispatchResult(url=url, index=index, response=dispatch(url))
    except DispatchError as exc:
        return DispatchResult(url=url, index=index, error=exc)


def _discard(responses: Iterable[Response]) -> None:
    for response in responses:
        response.close()


def run_sequential(dispatch: Dispatch, urls: Iterable[str]) -> list[Response]:
    """Dispatch in input order; on the first failure close what was collected and raise."""
    responses: list[Response] = []
    for url in urls:
        try:
            responses.append(dispatch(url))
        except DispatchError as exc:
            logger.warning("Sequential fan-out aborted at %s: %s", url, exc)
            _discard(responses)
            raise
    return responses


def run_sequential_results(dispatch: Dispatch, urls: Iterable[str]) -> list[DispatchResult]:
    return [_run_unit(dispatch, index, url) for index, url in enumerate(urls)]


def run_concurrent(
    dispatch: Dispatch,
    urls: Iterable[str],
    *,
    order: FanoutOrder = FanoutOrder.INPUT,
) -> list[DispatchResult]:
    """Dispatch every URL on its own thread and return one result per URL after all finish."""
    targets: Sequence[str] = list(urls)
    if not targets:
        return []

    with ThreadPoolExecutor(max_workers=len(targets), thread_name_prefix="fanclient") as pool:
        futures: list[Future[DispatchResult]] = [
            pool.submit(_run_unit, dispatch, index, url) for index, url in enumerate(targets)
        ]

        if order is FanoutOrder.COMPLETION:
            return [future.result() for future in as_completed(futures)]

        wait(futures)
        return [future.result() for future in futures]


def collect_responses(results: Iterable[DispatchResult]) -> list[Response]:
    """Keep successful responses; log each failure and drop it."""
    responses: list[Response] = []
    for result in results:
        if result.ok:
            responses.append(result.response)
        else:
            logger.warning("Fan-out request to %s failed: %s", result.url, result.error)
    return responses


__all__ = [
    "FanoutOrder",
    "collect_responses",
    "run_concurrent",
    "run_sequential",
    "run_sequential_results",
]
