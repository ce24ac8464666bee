"""
Shared pytest fixtures for trellokit tests
"""
import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from trellokit import TrelloClient


@pytest.fixture
def fixtures_dir():
    """Return path to test fixtures directory"""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def simple_board_fixture(fixtures_dir):
    """Load simple board test fixture"""
    with open(fixtures_dir / "simple_board.json") as f:
        return json.load(f)


@pytest.fixture
def client():
    """TrelloClient whose rate limiter never blocks"""
    trello = TrelloClient(api_key="test_key", token="test_token")
    with patch.object(trello.rate_limiter, "acquire", return_value=True):
        yield trello


@pytest.fixture
def json_response():
    """Factory for a successful mocked requests.Response"""

    def make(payload, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    return make
