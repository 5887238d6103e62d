""" Unit tests for building and sending result submissions. """

import pytest

from shrthnder.app.errors import IncompleteResultsError, SubmissionFailure
from shrthnder.app.models import Feedback, TestResult
from shrthnder.services.results import ResultSubmitter, build_submission
from shrthnder.utils import db_helper

NORMAL = TestResult(wpm=40, accuracy=95, time_in_seconds=10, input_text="typed normally")
SHORTHAND = TestResult(wpm=80, accuracy=100, time_in_seconds=5, input_text="typed with shortcuts")


def test_build_submission() -> None:
    payload = build_submission("general", NORMAL, SHORTHAND, Feedback(rating=8, comment="nice", email="a@b.c"))
    assert payload.to_dict() == {
        "job_category": "general",
        "shorthand_test": {"wpm": 80, "accuracy": 100, "time_in_seconds": 5},
        "normal_test": {"wpm": 40, "accuracy": 95, "time_in_seconds": 10},
        "time_saved": {"seconds": 5, "percentage": 50},
        "feedback": {"rating": 8, "comment": "nice", "email": "a@b.c"},
    }


def test_build_submission_default_feedback() -> None:
    payload = build_submission("tech", NORMAL, SHORTHAND)
    assert payload.feedback == Feedback(rating=5, comment="", email="")


def test_build_submission_passes_values_through() -> None:
    """ Cleaning category and rating is the caller's job. """
    payload = build_submission("Legal", NORMAL, SHORTHAND, Feedback(rating=15))
    assert payload.job_category == "Legal"
    assert payload.feedback.rating == 15


def test_build_submission_needs_both_results() -> None:
    with pytest.raises(IncompleteResultsError):
        build_submission("general", NORMAL, None)
    with pytest.raises(IncompleteResultsError):
        build_submission("general", None, SHORTHAND)


class _Api:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []
    async def submit_result(self, payload):
        if self.fail:
            raise SubmissionFailure("server said no")
        self.sent.append(payload)
        return {"message": "ok"}


@pytest.mark.asyncio
async def test_submit_records_locally(tmp_path) -> None:
    db = tmp_path / "results.db"
    api = _Api()
    payload = build_submission("general", NORMAL, SHORTHAND)
    ack = await ResultSubmitter(api, db).submit(payload)
    assert ack == {"message": "ok"}
    assert api.sent == [payload.to_dict()]
    stored = db_helper.get_results(db)
    assert len(stored) == 1
    assert stored[0]["time_saved"] == {"seconds": 5, "percentage": 50}
    assert "timestamp" in stored[0]


@pytest.mark.asyncio
async def test_failed_submit_can_be_retried(tmp_path) -> None:
    db = tmp_path / "results.db"
    api = _Api(fail=True)
    submitter = ResultSubmitter(api, db)
    payload = build_submission("general", NORMAL, SHORTHAND)
    with pytest.raises(SubmissionFailure):
        await submitter.submit(payload)
    assert db_helper.get_results(db) == []

    api.fail = False
    await submitter.submit(payload)
    assert len(api.sent) == 1
    assert len(db_helper.get_results(db)) == 1


@pytest.mark.asyncio
async def test_accepted_submit_survives_unusable_data_dir(tmp_path) -> None:
    """ Once the server has the result, a local storage problem must not look like a failed submit. """
    blocker = tmp_path / "data"
    blocker.write_text("not a directory")
    api = _Api()
    payload = build_submission("general", NORMAL, SHORTHAND)
    ack = await ResultSubmitter(api, blocker / "results.db").submit(payload)
    assert ack == {"message": "ok"}
    assert api.sent == [payload.to_dict()]
