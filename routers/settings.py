"""
Business settings API: the shop details printed on invoices.

Any signed-in user can read them; only Developers can change them.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth import ROLE_DEVELOPER, require_role, verify_token
from database import get_session
from schemas.invoice import BusinessDetails
from schemas.settings import BusinessSettingsUpdate
from services.settings_service import SettingsService

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get(
     "/business",
     response_model=BusinessDetails,
     summary="Get business details"
)
def get_business_details(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return SettingsService.get_business_details(db)


@router.put(
     "/business",
     response_model=BusinessDetails,
     summary="Update business details"
)
def update_business_details(
     body: BusinessSettingsUpdate,
     db: Session = Depends(get_session),
     token: dict = Depends(require_role(ROLE_DEVELOPER))
):
     details = SettingsService.update_business_details(db, body)
     db.commit()
     return details
