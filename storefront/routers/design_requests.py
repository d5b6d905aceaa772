# storefront/routers/design_requests.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import require_auth
from storefront.database import get_session
from storefront.models.profile import Profile
from storefront.repositories.design_request_repo import DesignRequestRepository
from storefront.schemas.design_request import DesignRequestCreate, DesignRequestRead
from storefront.services.design_request_service import DesignRequestService

router = APIRouter(prefix="/design-requests", tags=["Custom Design"])

service = DesignRequestService(DesignRequestRepository())


@router.post(
    "",
    response_model=DesignRequestRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_design_request(
    payload: DesignRequestCreate,
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    """
    Submit a custom design request. Our designer follows up by phone.
    """
    return service.submit(session, current_user.id, payload)


@router.get("/me", response_model=list[DesignRequestRead])
def list_my_design_requests(
    session: Session = Depends(get_session),
    current_user: Profile = Depends(require_auth),
):
    return service.list_mine(session, current_user.id)
