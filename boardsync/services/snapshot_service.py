"""Orchestration of communication from API router to the persistence layer (server side of the snapshot store)."""

import logging

from boardsync.api.models import StateResponse, StoreStateRequest, SuccessResponse
from boardsync.db.repository import SnapshotRepository

logger = logging.getLogger(__name__)


class SnapshotService:
    """Blobs are stored as-is: the service never looks inside an envelope, versioning is the clients' business."""

    def __init__(self, repository: SnapshotRepository) -> None:
        self.repo = repository

    def get_state(self, session_id: int, name: str) -> StateResponse:
        return StateResponse(state=self.repo.get_state(session_id, name))

    def store_state(self, session_id: int, request: StoreStateRequest) -> SuccessResponse:
        self.repo.put_state(session_id, request.name, request.state)
        logger.debug("Stored %r for session %s", request.name, session_id)
        return SuccessResponse()

    def remove_state(self, session_id: int, name: str) -> SuccessResponse:
        self.repo.delete_state(session_id, name)
        return SuccessResponse()
