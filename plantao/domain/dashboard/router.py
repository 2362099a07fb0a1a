"""Dashboard router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_doctor
from ...database import get_db
from ...models import User
from .schemas import DashboardSummary
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=DashboardSummary)
async def get_dashboard(
    current_user: User = Depends(get_current_doctor),
    db: Session = Depends(get_db),
):
    return DashboardService(db).summary(current_user)
