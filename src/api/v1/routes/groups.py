"""Group API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_group_service
from api.v1.schemas.common import ErrorResponse, MembershipChangeResponse
from api.v1.schemas.group import (
    GroupCreate,
    GroupDetailResponse,
    GroupResponse,
    JoinRequestListResponse,
    JoinResponse,
)
from core.rate_limit import limiter
from domain.entities.group import Group, GroupType, MembershipStatus
from domain.services.group_service import GroupService, JoinResult

router = APIRouter(
    prefix="/groups",
    tags=["groups"],
)

_JOIN_MESSAGES = {
    JoinResult.JOINED: "Joined group",
    JoinResult.REQUESTED: "Join request submitted",
}


@router.post(
    "",
    response_model=GroupDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a group",
    responses={
        201: {"description": "Group created"},
        400: {"model": ErrorResponse, "description": "Invalid group fields"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_group(
    request: Request,
    body: GroupCreate,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Create an open or private group. The caller becomes its owner."""
    group = await service.create(
        user_id=user.id,
        name=body.name,
        group_type=GroupType(body.type),
        max_members=body.max_members,
    )
    return GroupDetailResponse(data=_build_group_response(group, user.id))


@router.get(
    "/{group_id}",
    response_model=GroupDetailResponse,
    summary="Get a group",
    responses={
        200: {"description": "Group details"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> GroupDetailResponse:
    """Get a group.

    The member list is shown to members and pending requesters; pending and
    banished lists to the owner only.
    """
    group = await service.get_by_id(group_id)
    return GroupDetailResponse(data=_build_group_response(group, user.id))


@router.post(
    "/{group_id}/join",
    response_model=JoinResponse,
    summary="Join or request to join a group",
    responses={
        200: {"description": "Joined (open group) or request submitted (private group)"},
        403: {"model": ErrorResponse, "description": "Banished or cooldown in effect"},
        404: {"model": ErrorResponse, "description": "Group not found"},
        409: {"model": ErrorResponse, "description": "Already a member or group full"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def join_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> JoinResponse:
    """Join an open group directly, or queue a request for a private group."""
    result = await service.join(group_id, user.id)
    return JoinResponse(status=result.value, message=_JOIN_MESSAGES[result])


@router.post(
    "/{group_id}/leave",
    response_model=MembershipChangeResponse,
    summary="Leave a group",
    responses={
        200: {"description": "Left the group"},
        400: {"model": ErrorResponse, "description": "Not a group member"},
        403: {"model": ErrorResponse, "description": "Owner must transfer ownership first"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def leave_group(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> MembershipChangeResponse:
    """Leave a group. Starts a 48 hour cooldown before re-requesting."""
    await service.leave(group_id, user.id)
    return MembershipChangeResponse(group_id=group_id, user_id=user.id, message="Left group")


@router.post(
    "/{group_id}/banish",
    response_model=MembershipChangeResponse,
    summary="Banish a user from a group",
    responses={
        200: {"description": "User banished"},
        403: {"model": ErrorResponse, "description": "Not the owner, or target is the owner"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def banish_user(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    user_id: str = Query(..., min_length=1, max_length=255),
    service: GroupService = Depends(get_group_service),
) -> MembershipChangeResponse:
    """Remove a user from the group and block direct re-entry. Owner only."""
    await service.banish(group_id, user.id, user_id)
    return MembershipChangeResponse(
        group_id=group_id, user_id=user_id, message="User banished"
    )


@router.post(
    "/{group_id}/approve",
    response_model=MembershipChangeResponse,
    summary="Approve a join request",
    responses={
        200: {"description": "User approved"},
        400: {"model": ErrorResponse, "description": "No such join request"},
        403: {"model": ErrorResponse, "description": "Not the owner"},
        404: {"model": ErrorResponse, "description": "Group not found"},
        409: {"model": ErrorResponse, "description": "Group full"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def approve_request(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    user_id: str = Query(..., min_length=1, max_length=255),
    service: GroupService = Depends(get_group_service),
) -> MembershipChangeResponse:
    """Approve a pending join request for a private group. Owner only."""
    await service.approve(group_id, user.id, user_id)
    return MembershipChangeResponse(
        group_id=group_id, user_id=user_id, message="Request approved"
    )


@router.get(
    "/{group_id}/requests",
    response_model=JoinRequestListResponse,
    summary="List pending join requests",
    responses={
        200: {"description": "Pending join requests"},
        403: {"model": ErrorResponse, "description": "Not the owner"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_join_requests(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: GroupService = Depends(get_group_service),
) -> JoinRequestListResponse:
    """Get the user ids waiting for approval. Owner only."""
    pending = await service.get_join_requests(group_id, user.id)
    return JoinRequestListResponse(data=pending, meta={"total": len(pending)})


def _build_group_response(group: Group, viewer_id: str) -> GroupResponse:
    """Convert domain entity to response schema."""
    is_owner = group.is_owner(viewer_id)
    sees_members = group.status_of(viewer_id) in (
        MembershipStatus.MEMBER,
        MembershipStatus.PENDING,
    )
    return GroupResponse(
        id=group.id,
        name=group.name,
        type=group.type.value,
        owner_id=group.owner_id,
        max_members=group.max_members,
        member_count=group.member_count,
        members=sorted(group.members) if sees_members else None,
        join_requests=sorted(group.join_requests) if is_owner else None,
        banished_users=sorted(group.banished_users) if is_owner else None,
        created_at=group.created_at,
    )
