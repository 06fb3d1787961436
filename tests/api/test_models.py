"""Unit tests for boardsync/api/models.py"""

import pytest
from pydantic import ValidationError

from boardsync.api.models import StateResponse, StoreStateRequest, SuccessResponse


def test_store_state_request() -> None:
    request = StoreStateRequest(name="game-1", state='{"version": 0}')
    assert request.name == "game-1"
    assert request.state == '{"version": 0}'


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "game-1"},
        {"state": "blob"},
        {"name": "   ", "state": "blob"},
        {"name": "game-1", "state": None},
    ],
)
def test_invalid_store_state_request(payload: dict) -> None:
    with pytest.raises(ValidationError):
        StoreStateRequest(**payload)


def test_responses() -> None:
    assert StateResponse(state=None).model_dump() == {"state": None}
    assert SuccessResponse().model_dump() == {"success": True}
