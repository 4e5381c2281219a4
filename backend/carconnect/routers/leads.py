from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..db import get_db
from ..models import User
from ..schemas.lead import LeadCreate, LeadOut
from ..services.leads_service import LeadsService

router = APIRouter(prefix="/api/leads", tags=["leads"])


@router.post("", response_model=LeadOut, status_code=status.HTTP_201_CREATED)
def create_lead(
    payload: LeadCreate,
    user: User | None = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return LeadsService(db).create(payload, user=user)
