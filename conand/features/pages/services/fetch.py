"""
Joint content fetch for a page render.

Reads are independent, so they run side by side; each one that fails is
logged and replaced by its default while the others still complete.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Tuple

from conand.models.content_store import ContentUnavailableError

logger = logging.getLogger(__name__)

MAX_WORKERS = 6

# name -> (callable with no arguments, default value)
FetchPlan = Dict[str, Tuple[Callable[[], Any], Any]]


def fetch_concurrently(plan: FetchPlan) -> Dict[str, Any]:
    """Run every read in the plan and return {name: result or default}."""
    if not plan:
        return {}

    results: Dict[str, Any] = {}
    with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(plan))) as pool:
        futures = {name: pool.submit(fn) for name, (fn, _default) in plan.items()}
        for name, future in futures.items():
            default = plan[name][1]
            try:
                results[name] = future.result()
            except ContentUnavailableError as e:
                logger.warning("Content unavailable for %s: %s", name, e)
                results[name] = default
            except Exception:
                logger.exception("Content read %s failed", name)
                results[name] = default
    return results
