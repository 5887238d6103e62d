from __future__ import annotations
import logging
from typing import Optional

from shrthnder.app.calculation import combine
from shrthnder.app.errors import DatabaseError, IncompleteResultsError
from shrthnder.app.models import Feedback, SubmissionPayload, TestResult
from shrthnder.utils import db_helper

logger = logging.getLogger(__name__)


def build_submission(category: str, normal: Optional[TestResult], shorthand: Optional[TestResult],
                     feedback: Optional[Feedback] = None) -> SubmissionPayload:
    """
    Package both results with the time saved. Only the presence of both
    results is checked; callers hand in a category and feedback that are
    already clean (see validation.normalize_category / clamp_rating).
    """
    if normal is None or shorthand is None:
        logger.error("Tried to build a submission before both tests finished")
        raise IncompleteResultsError("both the normal and the shorthand test must be finished")
    return SubmissionPayload(
        job_category=category,
        normal_test=normal,
        shorthand_test=shorthand,
        time_saved=combine(normal, shorthand),
        feedback=feedback or Feedback(),
    )


class ResultSubmitter:
    """
    Sends a finished pair of tests to the server and keeps a local copy.
    The payload is left untouched on failure so the same attempt can be
    submitted again.
    """

    def __init__(self, api, db_path=None):
        self.api = api
        self.db_path = db_path

    async def submit(self, payload: SubmissionPayload) -> dict:
        # SubmissionFailure propagates to the caller
        ack = await self.api.submit_result(payload.to_dict())
        try:
            db_helper.save_result(payload.to_dict(), self.db_path)
        except DatabaseError as e:
            logger.warning("Submitted, but could not store result locally: %s", e)
        return ack
