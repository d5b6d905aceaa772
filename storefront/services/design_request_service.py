# storefront/services/design_request_service.py
import logging
import uuid

from sqlmodel import Session

from storefront.models.design_request import CustomDesignRequest
from storefront.repositories.design_request_repo import DesignRequestRepository
from storefront.schemas.design_request import DesignRequestCreate

logger = logging.getLogger(__name__)


class DesignRequestService:
    """
    Custom design requests. The design team follows up by phone, so new
    requests always start as "pending".
    """

    def __init__(self, repo: DesignRequestRepository):
        self.repo = repo

    def submit(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: DesignRequestCreate,
    ) -> CustomDesignRequest:
        request = self.repo.create(
            session,
            CustomDesignRequest(
                user_id=user_id,
                description=payload.description,
                requirements=payload.requirements.to_json(),
                status="pending",
            ),
        )
        logger.info("Design request %s submitted by user %s", request.id, user_id)
        return request

    def list_mine(
        self, session: Session, user_id: uuid.UUID
    ) -> list[CustomDesignRequest]:
        return self.repo.list_for_user(session, user_id)
