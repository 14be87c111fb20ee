"""
Pytest configuration and fixtures.

Provides shared test fixtures for mihari tests.
"""

import pytest
import logging

from mihari.core import MockTransport
from mihari.profiles import ProfileRegistry, build_quectel_schemas, quectel_profile
from mihari import ModemSession


# Enable logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Fixed capture time for decoded records
FIXED_TIME = 1700000000000

LTE_LINE = '+QENG: "servingcell","NOCONN","LTE","FDD",440,10,2734811,235,6100,19,3,3,1684,-81,-10,-54,19,50'
LTE_SENTINEL_LINE = '+QENG: "servingcell","NOCONN","LTE","FDD",-,-,-,-,-,-,-,-,-,-,-,-,-,-'
WCDMA_LINE = '+QENG: "servingcell","NOCONN","WCDMA",440,10,75,6FE0090,10736,58,0,-78,-3,-,-,-,-,-'
SEARCH_LINE = '+QENG: "servingcell","SEARCH"'


@pytest.fixture
def schemas():
    """Quectel schema table with a fixed clock."""
    return build_quectel_schemas(clock=lambda: FIXED_TIME)


@pytest.fixture
def registry(schemas):
    """Profile registry using the fixed-clock schema table."""
    return ProfileRegistry([quectel_profile(schemas)])


@pytest.fixture
def mock_transport():
    """
    Create a MockTransport instance for testing.

    Example:
        def test_something(mock_transport):
            mock_transport.add_response(["OK"])
            # ... test code ...
    """
    transport = MockTransport()
    yield transport
    transport.close()


@pytest.fixture
def session(mock_transport, registry):
    """
    Create a ModemSession over MockTransport, not yet initialized.

    Example:
        def test_init(session, mock_transport, init_responses):
            for response in init_responses:
                mock_transport.add_response(response)
            session.initialize()
    """
    session = ModemSession(transport=mock_transport, registry=registry, max_wait=1.0)
    yield session
    session.close()


@pytest.fixture
def mock_model_info_response():
    """Mock response for ATI command."""
    return ["Quectel", "EG25", "Revision: EG25GGBR07A08M2G", "", "OK"]


@pytest.fixture
def mock_imei_response():
    """Mock response for AT+CGSN command."""
    return ["861536030196001", "", "OK"]


@pytest.fixture
def mock_imsi_response():
    """Mock response for AT+CIMI command."""
    return ["440103123456789", "", "OK"]


@pytest.fixture
def mock_iccid_response():
    """Mock response for AT+QCCID command."""
    return ["+QCCID: 8981100022152143219F", "", "OK"]


@pytest.fixture
def mock_lte_response():
    """Mock response for AT+QENG="servingcell" on LTE."""
    return [LTE_LINE, "", "OK"]


@pytest.fixture
def init_responses(
    mock_model_info_response,
    mock_imei_response,
    mock_imsi_response,
    mock_iccid_response,
    mock_lte_response
):
    """Responses for every command issued by ModemSession.initialize()."""
    return [
        mock_model_info_response,
        mock_imei_response,
        mock_imsi_response,
        mock_iccid_response,
        mock_lte_response,
    ]


@pytest.fixture
def initialized_session(session, mock_transport, init_responses):
    """ModemSession after a successful initialize()."""
    for response in init_responses:
        mock_transport.add_response(response)
    session.initialize()
    return session
