# storefront/repositories/design_request_repo.py
import uuid

from sqlmodel import Session, col, select

from storefront.models.design_request import CustomDesignRequest


class DesignRequestRepository:

    def list_for_user(
        self, session: Session, user_id: uuid.UUID
    ) -> list[CustomDesignRequest]:
        stmt = (
            select(CustomDesignRequest)
            .where(CustomDesignRequest.user_id == user_id)
            .order_by(col(CustomDesignRequest.created_at).desc())
        )
        return list(session.exec(stmt).all())

    def create(
        self, session: Session, request: CustomDesignRequest
    ) -> CustomDesignRequest:
        session.add(request)
        session.commit()
        session.refresh(request)
        return request
