"""
Tests for telemetry forwarders.
"""

import json
import logging
from unittest import mock

import pytest
import requests

from mihari.forwarder import HarvestForwarder, LogForwarder, create_forwarder
from mihari.exceptions import ConfigError, ForwarderError


PAYLOAD = {"time": 1700000000000, "rat": "LTE", "state": "NOCONN", "rsrp": -81}


@pytest.fixture
def http_session():
    """Mocked requests.Session."""
    session = mock.create_autospec(requests.Session, instance=True)
    session.headers = {}
    return session


def test_harvest_posts_json(http_session):
    """Test the payload is posted as a JSON body."""
    forwarder = HarvestForwarder(url="http://harvest.example", timeout=3.0, session=http_session)

    forwarder.send(PAYLOAD)

    http_session.post.assert_called_once_with(
        "http://harvest.example",
        data=json.dumps(PAYLOAD),
        timeout=3.0
    )
    http_session.post.return_value.raise_for_status.assert_called_once()
    assert http_session.headers["Content-Type"] == "application/json"


def test_harvest_http_error(http_session):
    """Test an error status raises ForwarderError."""
    http_session.post.return_value.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    forwarder = HarvestForwarder(session=http_session)

    with pytest.raises(ForwarderError) as exc_info:
        forwarder.send(PAYLOAD)

    assert exc_info.value.response == json.dumps(PAYLOAD)


def test_harvest_connection_error(http_session):
    """Test an unreachable collector raises ForwarderError."""
    http_session.post.side_effect = requests.ConnectionError("connection refused")
    forwarder = HarvestForwarder(session=http_session)

    with pytest.raises(ForwarderError):
        forwarder.send(PAYLOAD)


def test_harvest_close(http_session):
    """Test close releases the HTTP session."""
    HarvestForwarder(session=http_session).close()

    http_session.close.assert_called_once()


def test_log_forwarder(caplog):
    """Test the log forwarder writes the JSON payload."""
    with caplog.at_level(logging.INFO, logger="mihari.forwarder"):
        LogForwarder().send(PAYLOAD)

    assert json.dumps(PAYLOAD) in caplog.text


def test_create_forwarder():
    """Test forwarders are selected by name."""
    harvest = create_forwarder("harvest", url="http://harvest.example")

    assert isinstance(harvest, HarvestForwarder)
    assert harvest.url == "http://harvest.example"
    assert isinstance(create_forwarder("log"), LogForwarder)

    harvest.close()


def test_create_unknown_forwarder():
    """Test an unknown forwarder name is a configuration error."""
    with pytest.raises(ConfigError):
        create_forwarder("mqtt")
