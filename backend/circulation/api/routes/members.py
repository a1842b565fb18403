"""Member Routes — current borrowing status of one member."""

from fastapi import APIRouter, Depends

from circulation.core.domain_types import MemberId
from circulation.api.dependencies import get_desk
from circulation.schemas.loan import MemberStatusResponse
from circulation.services.circulation_desk import CirculationDesk

router = APIRouter(prefix="/api/v1/members", tags=["members"])


@router.get("/{member_id}/status", response_model=MemberStatusResponse)
async def member_status(member_id: int, desk: CirculationDesk = Depends(get_desk)):
    event = await desk.member_status(MemberId(member_id))
    return MemberStatusResponse(
        member_id=member_id,
        member_code=event.member_code,
        full_name=event.member_name,
        active_borrows=event.active_borrows,
        overdue_borrows=event.overdue_borrows,
        max_borrows=desk.engine.policy.max_active_borrows,
    )
