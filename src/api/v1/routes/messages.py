"""Message API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_message_service
from api.v1.schemas.common import ErrorResponse
from api.v1.schemas.message import (
    MessageCreate,
    MessageListResponse,
    MessageResponse,
    MessageSentDetailResponse,
    MessageSentResponse,
)
from core.rate_limit import limiter
from domain.services.message_service import MessageService

router = APIRouter(
    prefix="/groups/{group_id}/messages",
    tags=["messages"],
)


@router.post(
    "",
    response_model=MessageSentDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message to a group",
    responses={
        201: {"description": "Message stored encrypted"},
        403: {"model": ErrorResponse, "description": "Not a group member"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def send_message(
    request: Request,
    group_id: UUID,
    body: MessageCreate,
    user: CurrentUser,
    service: MessageService = Depends(get_message_service),
) -> MessageSentDetailResponse:
    """Encrypt and store a message. Requires group membership."""
    message = await service.send(group_id, user.id, body.text)
    return MessageSentDetailResponse(
        data=MessageSentResponse(id=message.id, timestamp=message.timestamp)
    )


@router.get(
    "",
    response_model=MessageListResponse,
    summary="List group messages",
    responses={
        200: {"description": "Decrypted messages, oldest first"},
        403: {"model": ErrorResponse, "description": "Not a group member"},
        404: {"model": ErrorResponse, "description": "Group not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_messages(
    request: Request,
    group_id: UUID,
    user: CurrentUser,
    service: MessageService = Depends(get_message_service),
) -> MessageListResponse:
    """Get all messages of a group, oldest first. Requires group membership."""
    messages = await service.get_for_group(group_id, user.id)
    data = [MessageResponse.model_validate(m) for m in messages]
    return MessageListResponse(data=data, meta={"total": len(data)})
