"""Events-table change notifications (webhook from the realtime backend)."""

import logging
from typing import Optional

from fastapi import APIRouter

from recommender import ChangeNotification

from ..models import ChangeNotificationRequest
from ..state import get_state

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/changes", status_code=202)
async def notify_change(request: Optional[ChangeNotificationRequest] = None):
    """Enqueue a cache invalidation; the invalidator task applies it."""
    state = get_state()
    request = request or ChangeNotificationRequest()
    accepted = state.channel.publish(ChangeNotification(source=request.source))
    logger.debug(
        "[events] change source=%s operation=%s event_id=%s accepted=%s",
        request.source, request.operation, request.event_id, accepted,
    )
    return {"accepted": accepted, "pending": state.channel.pending}
