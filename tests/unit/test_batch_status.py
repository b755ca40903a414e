"""Classification of batch operation reports into status snapshots.

These tests verify that:
- Every server state maps onto exactly one snapshot type
- A finished report with neither results nor an error is an error, not a guess
- Results keep the order the server sent them in
- Classification depends only on its inputs
"""

import pytest

from gemini_rest.batch import (
    BatchCancelled,
    BatchExpired,
    BatchFailed,
    BatchOperation,
    BatchPending,
    BatchRunning,
    BatchState,
    BatchStatus,
    BatchSucceeded,
    classify_operation,
)
from gemini_rest.exceptions import DecodeError, InconsistentBatchStateError
from gemini_rest.models import OperationError
from tests.helpers import operation_report, text_response


def _status(report: dict) -> BatchStatus:
    operation = BatchOperation.from_wire({"name": "batches/abc", **report})
    return BatchStatus.from_operation(operation)


class TestStateParsing:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("BATCH_STATE_RUNNING", BatchState.RUNNING),
            ("JOB_STATE_SUCCEEDED", BatchState.SUCCEEDED),
            ("EXPIRED", BatchState.EXPIRED),
            ("JOB_STATE_CANCELED", BatchState.CANCELLED),
            ("queued", BatchState.PENDING),
        ],
    )
    def test_state_spellings_normalize_to_members(self, raw, expected):
        assert BatchState(raw) is expected

    @pytest.mark.unit
    def test_unknown_state_is_tolerated_and_treated_as_pending(self, caplog):
        status = _status(operation_report("BATCH_STATE_PAUSED"))

        assert isinstance(status, BatchPending)
        assert "BATCH_STATE_PAUSED" in caplog.text


class TestClassification:
    @pytest.mark.unit
    def test_missing_state_is_pending(self):
        assert isinstance(_status(operation_report()), BatchPending)

    @pytest.mark.unit
    def test_running_carries_request_counts(self):
        status = _status(
            operation_report(
                "BATCH_STATE_RUNNING",
                stats={"requestCount": "10", "pendingRequestCount": "4", "successfulRequestCount": "6"},
            )
        )

        assert isinstance(status, BatchRunning)
        assert status.stats.total == 10
        assert status.stats.pending == 4
        assert status.stats.completed == 6
        assert status.stats.failed == 0
        assert not status.is_terminal

    @pytest.mark.unit
    def test_cancelled_and_expired_are_terminal(self):
        cancelled = _status(operation_report("BATCH_STATE_CANCELLED", done=True))
        expired = _status(operation_report("EXPIRED"))

        assert isinstance(cancelled, BatchCancelled)
        assert isinstance(expired, BatchExpired)
        assert cancelled.is_terminal and expired.is_terminal

    @pytest.mark.unit
    def test_error_payload_means_failed(self):
        status = _status(
            operation_report(
                "BATCH_STATE_FAILED",
                done=True,
                error={"code": 3, "message": "bad input file"},
            )
        )

        assert isinstance(status, BatchFailed)
        assert status.error.code == 3
        assert status.error.message == "bad input file"

    @pytest.mark.unit
    def test_two_results_in_supplied_order(self):
        status = _status(
            operation_report(
                "BATCH_STATE_SUCCEEDED",
                done=True,
                responses=[
                    {"response": text_response("second"), "metadata": {"key": "1"}},
                    {"response": text_response("first"), "metadata": {"key": "0"}},
                ],
            )
        )

        assert isinstance(status, BatchSucceeded)
        assert len(status.results) == 2
        assert [r.key for r in status.results] == ["1", "0"]
        assert [r.response.text() for r in status.results] == ["second", "first"]
        assert all(r.is_success for r in status.results)

    @pytest.mark.unit
    def test_per_item_errors_are_kept(self):
        status = _status(
            operation_report(
                "BATCH_STATE_SUCCEEDED",
                done=True,
                responses=[
                    {"response": text_response("ok")},
                    {"error": {"code": 8, "message": "quota"}},
                ],
            )
        )

        assert [r.key for r in status.results] == ["0", "1"]
        assert status.results[1].error.message == "quota"
        assert not status.results[1].is_success

    @pytest.mark.unit
    def test_results_file_is_reported(self):
        operation = BatchOperation.from_wire(
            {
                "name": "batches/abc",
                "done": True,
                "metadata": {
                    "state": "BATCH_STATE_SUCCEEDED",
                    "output": {"responsesFile": "files/results-1"},
                },
            }
        )

        status = BatchStatus.from_operation(operation)

        assert isinstance(status, BatchSucceeded)
        assert status.results == ()
        assert status.responses_file == "files/results-1"


class TestInconsistentReports:
    @pytest.mark.unit
    def test_done_without_result_or_error_is_rejected(self):
        with pytest.raises(InconsistentBatchStateError) as exc_info:
            _status(operation_report(done=True))

        assert exc_info.value.name == "batches/abc"

    @pytest.mark.unit
    def test_succeeded_state_without_result_is_rejected(self):
        with pytest.raises(InconsistentBatchStateError):
            _status(operation_report("BATCH_STATE_SUCCEEDED"))

    @pytest.mark.unit
    def test_failed_state_without_error_is_rejected(self):
        with pytest.raises(InconsistentBatchStateError):
            _status(operation_report("BATCH_STATE_FAILED", done=True, responses=[]))

    @pytest.mark.unit
    def test_result_item_without_response_or_error_is_rejected(self):
        with pytest.raises(InconsistentBatchStateError):
            _status(operation_report("BATCH_STATE_SUCCEEDED", done=True, responses=[{}]))

    @pytest.mark.unit
    def test_malformed_report_is_a_decode_error(self):
        with pytest.raises(DecodeError):
            BatchOperation.from_wire({"metadata": {}})


class TestPurity:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("state", "done", "error"),
        [
            (BatchState.PENDING, False, None),
            (BatchState.RUNNING, False, None),
            (BatchState.CANCELLED, True, None),
            (BatchState.EXPIRED, True, None),
            (BatchState.FAILED, True, OperationError(code=13, message="internal")),
        ],
    )
    def test_same_inputs_give_same_classification(self, state, done, error):
        first = classify_operation(state, done=done, error=error, response=None)
        second = classify_operation(state, done=done, error=error, response=None)

        assert type(first) is type(second)
        assert first == second
