"""Role catalogue and assignment router."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Request, status

from media_portal.dependencies import get_email_service, get_role_service
from media_portal.exceptions import ForbiddenError
from media_portal.models.domain.permission import Permission
from media_portal.models.domain.principal import Principal
from media_portal.models.dto.common import MessageResponse
from media_portal.models.dto.role import (
    RoleAssignmentResponse,
    RoleAssignRequest,
    RoleCreate,
    RoleResponse,
    RoleUpdate,
)
from media_portal.security.auth import AdminPrincipal, CurrentPrincipal, require_permission
from media_portal.security.rate_limit import get_real_client_ip
from media_portal.services.email_service import EmailService
from media_portal.services.role_service import RoleService

router = APIRouter()

RoleAssigner = Annotated[Principal, Depends(require_permission(Permission.ASSIGN_ROLES))]
Service = Annotated[RoleService, Depends(get_role_service)]


@router.get("", response_model=list[RoleResponse])
async def list_roles(service: Service) -> list[RoleResponse]:
    """List active roles. Public."""
    return [RoleResponse.model_validate(r) for r in await service.list_active()]


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(role_id: UUID, service: Service) -> RoleResponse:
    return RoleResponse.model_validate(await service.get(role_id))


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(body: RoleCreate, principal: AdminPrincipal, service: Service) -> RoleResponse:
    """Create a role. The slug is derived from the name when not given."""
    return RoleResponse.model_validate(await service.create(body))


@router.put("/{role_id}", response_model=RoleResponse)
async def update_role(
    role_id: UUID, body: RoleUpdate, principal: AdminPrincipal, service: Service
) -> RoleResponse:
    """Update a role. Renaming keeps the slug."""
    return RoleResponse.model_validate(await service.update(role_id, body))


@router.delete("/{role_id}", response_model=MessageResponse)
async def deactivate_role(role_id: UUID, principal: AdminPrincipal, service: Service) -> MessageResponse:
    """Soft-delete a role; its assignments stop granting permissions."""
    await service.deactivate(role_id)
    return MessageResponse(message="Role deactivated successfully")


@router.get("/users/{user_id}/roles", response_model=list[RoleAssignmentResponse])
async def get_user_roles(
    user_id: UUID, principal: CurrentPrincipal, service: Service
) -> list[RoleAssignmentResponse]:
    """A user's assignments. Users may only read their own."""
    if not principal.is_admin and principal.id != user_id:
        raise ForbiddenError("You can only view your own roles")
    return [RoleAssignmentResponse.model_validate(a) for a in await service.get_user_assignments(user_id)]


@router.post(
    "/users/{user_id}/roles",
    response_model=RoleAssignmentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_role(
    request: Request,
    user_id: UUID,
    body: RoleAssignRequest,
    principal: RoleAssigner,
    background_tasks: BackgroundTasks,
    service: Service,
    email_service: Annotated[EmailService, Depends(get_email_service)],
) -> RoleAssignmentResponse:
    """Assign a role; 409 when the user already holds it."""
    assignment, user, role = await service.assign(
        user_id, body.role_id, principal, body.notes, get_real_client_ip(request)
    )
    background_tasks.add_task(
        email_service.send_role_assigned_email,
        user.email,
        user.full_name,
        role.name,
        list(role.responsibilities or []),
    )
    return RoleAssignmentResponse.model_validate(assignment)


@router.delete("/users/{user_id}/roles/{role_id}", response_model=MessageResponse)
async def remove_role(
    request: Request,
    user_id: UUID,
    role_id: UUID,
    principal: RoleAssigner,
    service: Service,
) -> MessageResponse:
    await service.remove(user_id, role_id, principal, get_real_client_ip(request))
    return MessageResponse(message="Role removed successfully")
