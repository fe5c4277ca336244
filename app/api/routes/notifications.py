from typing import List

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_notifications
from app.api.schemas.notification import NotificationOut
from app.services.notifications import NotificationCenter

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationOut])
def recent_notifications(
    limit: int = Query(10, ge=1, le=100),
    center: NotificationCenter = Depends(get_notifications),
):
    """Most recent toast messages, oldest first."""
    return [NotificationOut(**n.to_dict()) for n in center.recent(limit)]
