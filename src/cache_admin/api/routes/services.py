"""
Service registry routes.

Non-admin callers only see, and only act on, services linked to their
account; reading or updating any other service is a 403.

    GET    /api/services
    GET    /api/services/{id}
    POST   /api/services        (Admin, Manager)
    PUT    /api/services/{id}
    DELETE /api/services/{id}   (Admin, Manager)
"""

from fastapi import APIRouter, Response, status

from cache_admin.api.dependencies import ServiceServiceDep, UserServiceDep
from cache_admin.api.schemas import ServiceCreate, ServiceRead, ServiceUpdate
from cache_admin.auth.dependencies import CurrentUser, ManagerUser

router = APIRouter(
    prefix="/api/services",
    tags=["Services"],
    responses={401: {"description": "Missing or invalid bearer token"}},
)

NOT_FOUND = {404: {"description": "Service not found"}}
FORBIDDEN = {403: {"description": "Caller may not access this service"}}


@router.get("", response_model=list[ServiceRead], summary="List services")
async def list_services(
    user: CurrentUser,
    services: ServiceServiceDep,
    users: UserServiceDep,
) -> list[ServiceRead]:
    """All services for Admins; linked services for everyone else."""
    allowed = await users.accessible_service_names(user)
    return [
        ServiceRead.model_validate(service)
        for service in await services.get_all()
        if allowed is None or service.name in allowed
    ]


@router.get(
    "/{service_id}",
    response_model=ServiceRead,
    responses={**NOT_FOUND, **FORBIDDEN},
    summary="Get a service",
)
async def get_service(
    service_id: str,
    user: CurrentUser,
    services: ServiceServiceDep,
    users: UserServiceDep,
) -> ServiceRead:
    service = await services.get_by_id(service_id)
    await users.ensure_access(user, service)
    return ServiceRead.model_validate(service)


@router.post(
    "",
    response_model=ServiceRead,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"description": "Caller is not an Admin or Manager"}, 404: {"description": "Agent not found"}},
    summary="Create a service",
)
async def create_service(body: ServiceCreate, user: ManagerUser, services: ServiceServiceDep) -> ServiceRead:
    return ServiceRead.model_validate(await services.create(body))


@router.put(
    "/{service_id}",
    response_model=ServiceRead,
    responses={**NOT_FOUND, **FORBIDDEN},
    summary="Update a service",
)
async def update_service(
    service_id: str,
    body: ServiceUpdate,
    user: CurrentUser,
    services: ServiceServiceDep,
    users: UserServiceDep,
) -> ServiceRead:
    """Only fields that are present and non-empty are changed."""
    service = await services.get_by_id(service_id)
    await users.ensure_access(user, service)
    return ServiceRead.model_validate(await services.update(service_id, body))


@router.delete(
    "/{service_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**NOT_FOUND, 403: {"description": "Caller is not an Admin or Manager"}},
    summary="Delete a service",
)
async def delete_service(service_id: str, user: ManagerUser, services: ServiceServiceDep) -> Response:
    await services.delete(service_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
