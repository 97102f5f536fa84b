"""
Pytest fixtures for the BAC Index quiz tests.
"""
import os
import sys
import tempfile

# CRITICAL: Disable rate limiting BEFORE any other imports
# This must be set before extensions is imported anywhere
os.environ['RATELIMIT_ENABLED'] = 'false'
os.environ['TESTING'] = 'true'
os.environ.setdefault('MAILJET_API_KEY', 'test-key')
os.environ.setdefault('MAILJET_API_SECRET', 'test-secret')
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='bac_logs_'))

import pytest
from unittest.mock import Mock, patch

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bac_questions import get_questions
from quiz_session import SESSION_KEYS


@pytest.fixture
def app():
    """Create application for testing."""
    from app_factory import create_app
    flask_app = create_app('testing')
    yield flask_app


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def mock_mailjet_client():
    """Mock Mailjet client that accepts every message."""
    with patch('mailjet_integration.get_mailjet_client') as get_client:
        mock_client = get_client.return_value
        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {
            'Messages': [
                {
                    'Status': 'success',
                    'To': [{'Email': 'test@example.com', 'MessageID': 'msg-12345'}]
                }
            ]
        }
        mock_client.send.create.return_value = mock_response
        yield mock_client


@pytest.fixture
def failing_mailjet_client():
    """Mock Mailjet client that rejects every message."""
    with patch('mailjet_integration.get_mailjet_client') as get_client:
        mock_client = get_client.return_value
        mock_response = Mock()
        mock_response.status_code = 401
        mock_response.json.return_value = {'ErrorMessage': 'Unauthorized'}
        mock_client.send.create.return_value = mock_response
        yield mock_client


@pytest.fixture
def sample_payload():
    """Result payload as the wizard (or a browser) would post it."""
    return {
        'name': 'Asha Rao',
        'email': 'asha@example.com',
        'phone': '+91 98765 43210',
        'company': 'Acme Health',
        'designation': 'Engineer',
        'physAge': 40,
        'bioAge': 47,
        'diff': 7,
        'topFactors': [
            {'label': 'Smoking', 'score': 5},
            {'label': 'Alcohol consumption', 'score': 3},
        ],
        'recommendations': [
            'Quit smoking; seek cessation support.',
            'Keep alcohol minimal.',
        ],
    }


@pytest.fixture
def details_client(client):
    """Test client that has completed step 1."""
    with client.session_transaction() as sess:
        sess[SESSION_KEYS['details']] = {
            'name': 'Asha Rao',
            'email': 'asha@example.com',
            'phone': '',
            'company': 'Acme Health',
            'designation': 'Engineer',
        }
        sess[SESSION_KEYS['step']] = 2
    return client


@pytest.fixture
def answered_client(details_client):
    """Test client with every question answered with the first choice."""
    total = len(get_questions())
    with details_client.session_transaction() as sess:
        sess[SESSION_KEYS['physical']] = {'phys_age': 40, 'weight_kg': 70, 'height_cm': 170}
        sess[SESSION_KEYS['answers']] = {str(i): 0 for i in range(total)}
        sess[SESSION_KEYS['current']] = total - 1
        sess[SESSION_KEYS['step']] = 3
    return details_client
