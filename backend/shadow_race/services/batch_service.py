"""Run one job per user, isolating failures."""

import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


async def run_for_users(
    db: Session,
    user_ids: Iterable[int],
    job: Callable[[int], Awaitable[Dict[str, Any]]],
    job_name: str,
) -> List[Dict[str, Any]]:
    """
    Await `job(user_id)` for each user and collect the results.
    
    A failing user gets {"ok": False, "error": ...} in its slot and the
    session is rolled back before the next user.
    """
    results = []
    failures = 0
    for user_id in user_ids:
        try:
            result = await job(user_id)
            results.append({"user_id": user_id, **result})
        except Exception as e:
            failures += 1
            logger.exception("%s failed for user %s", job_name, user_id)
            db.rollback()
            results.append({"user_id": user_id, "ok": False, "error": str(e) or e.__class__.__name__})
    logger.info("%s finished: %d users, %d failed", job_name, len(results), failures)
    return results
