"""Tests for TransferSession state machine."""
import pytest

from chunk_uploader.exceptions import HandshakeError, SessionStateError
from chunk_uploader.orchestrator.models import SessionState, TransferSession


class TestTransferSession:
    def test_initial_state(self):
        session = TransferSession(filename="a.bin", total_size=10)
        assert session.state == SessionState.NOT_STARTED
        assert session.handle is None
        assert session.bytes_transferred == 0
        assert session.cancel_requested is False

    def test_happy_path(self):
        session = TransferSession(filename="a.bin", total_size=10)
        session.start("h-1")
        assert session.state == SessionState.IN_PROGRESS
        assert session.record(6) == 6
        assert session.record(4) == 10
        session.complete()
        assert session.state == SessionState.COMPLETED

    def test_start_requires_handle(self):
        session = TransferSession(filename="a.bin", total_size=10)
        with pytest.raises(HandshakeError):
            session.start("")
        assert session.state == SessionState.NOT_STARTED

    def test_cannot_exceed_total(self):
        session = TransferSession(filename="a.bin", total_size=10)
        session.start("h-1")
        session.record(8)
        with pytest.raises(SessionStateError, match="exceeds total"):
            session.record(3)
        assert session.bytes_transferred == 8

    def test_record_requires_in_progress(self):
        session = TransferSession(filename="a.bin", total_size=10)
        with pytest.raises(SessionStateError):
            session.record(1)

    def test_complete_requires_all_bytes(self):
        session = TransferSession(filename="a.bin", total_size=10)
        session.start("h-1")
        session.record(5)
        with pytest.raises(SessionStateError):
            session.complete()

    def test_cancel_after_partial_transfer(self):
        session = TransferSession(filename="a.bin", total_size=10)
        session.start("h-1")
        session.record(5)
        session.request_cancel()
        session.cancel()
        assert session.state == SessionState.CANCELLED
        assert session.cancel_requested is True

    def test_begin_failure_goes_straight_to_failed(self):
        session = TransferSession(filename="a.bin", total_size=10)
        session.fail()
        assert session.state == SessionState.FAILED

    def test_terminal_states_are_not_revisited(self):
        session = TransferSession(filename="a.bin", total_size=0)
        session.start("h-1")
        session.complete()
        with pytest.raises(SessionStateError):
            session.start("h-2")
        with pytest.raises(SessionStateError):
            session.cancel()
        session.fail()
        assert session.state == SessionState.COMPLETED

    def test_cannot_cancel_before_start(self):
        session = TransferSession(filename="a.bin", total_size=10)
        with pytest.raises(SessionStateError):
            session.cancel()

    def test_negative_total_rejected(self):
        with pytest.raises(ValueError):
            TransferSession(filename="a.bin", total_size=-1)
