"""
Tests for the polling loop.
"""

import threading
from unittest import mock

import pytest

from mihari import Poller
from mihari.forwarder import Forwarder
from mihari.exceptions import ForwarderError, TransportUnavailable

from conftest import FIXED_TIME, LTE_LINE, SEARCH_LINE


@pytest.fixture
def forwarder():
    """Mocked forwarder recording every payload."""
    return mock.create_autospec(Forwarder, instance=True)


def test_run_once_forwards_payload(initialized_session, mock_transport, forwarder):
    """Test one cycle reads the cell and forwards its payload."""
    mock_transport.add_response([LTE_LINE, "", "OK"])
    poller = Poller(initialized_session, forwarder, interval=60)

    cell_info = poller.run_once()

    assert cell_info.rsrp == -81
    forwarder.send.assert_called_once_with(cell_info.to_payload())
    assert forwarder.send.call_args[0][0]["time"] == FIXED_TIME


def test_run_once_not_attached(initialized_session, mock_transport, forwarder):
    """Test a searching modem skips the cycle without forwarding."""
    mock_transport.add_response([SEARCH_LINE, "", "OK"])
    poller = Poller(initialized_session, forwarder, interval=60)

    assert poller.run_once() is None
    forwarder.send.assert_not_called()


def test_run_once_decode_failure(initialized_session, mock_transport, forwarder):
    """Test a malformed response skips the cycle."""
    mock_transport.add_response(["ERROR"])
    poller = Poller(initialized_session, forwarder, interval=60)

    assert poller.run_once() is None
    forwarder.send.assert_not_called()


def test_run_once_rat_without_decoder(initialized_session, mock_transport, forwarder):
    """Test a RAT without cell info forwards nothing."""
    mock_transport.add_response(['+QENG: "servingcell","CONNECT","GSM",440,10', "", "OK"])
    poller = Poller(initialized_session, forwarder, interval=60)

    assert poller.run_once() is None
    forwarder.send.assert_not_called()


def test_run_once_forwarder_error(initialized_session, mock_transport, forwarder):
    """Test a delivery failure is logged and the cycle ends."""
    forwarder.send.side_effect = ForwarderError("collector unreachable")
    mock_transport.add_response([LTE_LINE, "", "OK"])
    poller = Poller(initialized_session, forwarder, interval=60)

    assert poller.run_once() is None


def test_run_once_transport_failure(initialized_session, forwarder):
    """Test a serial failure propagates."""
    poller = Poller(initialized_session, forwarder, interval=60)

    # No response queued: the read times out
    with pytest.raises(TransportUnavailable):
        poller.run_once()


@pytest.mark.timeout(5)
def test_stop_before_run(initialized_session, forwarder):
    """Test a poller stopped before running never polls."""
    poller = Poller(initialized_session, forwarder, interval=60)
    poller.stop()

    poller.run()

    assert poller.is_stopped
    forwarder.send.assert_not_called()


@pytest.mark.timeout(5)
def test_stop_interrupts_wait(initialized_session, forwarder):
    """Test stop() ends the loop without waiting out the interval."""
    poller = Poller(initialized_session, forwarder, interval=60)
    thread = threading.Thread(target=poller.run)
    thread.start()

    poller.stop()
    thread.join(timeout=2)

    assert not thread.is_alive()
    forwarder.send.assert_not_called()


@pytest.mark.timeout(10)
def test_run_polls_on_interval(initialized_session, mock_transport, forwarder):
    """Test cycles repeat until stopped."""
    for _ in range(3):
        mock_transport.add_response([LTE_LINE, "", "OK"])
    poller = Poller(initialized_session, forwarder, interval=0.05)

    def stop_after_third(payload):
        if forwarder.send.call_count >= 3:
            poller.stop()

    forwarder.send.side_effect = stop_after_third
    poller.run()

    assert forwarder.send.call_count == 3
