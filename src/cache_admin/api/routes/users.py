"""
User management routes (Admin only).

    GET    /api/users
    POST   /api/users
    GET    /api/users/{id}
    PUT    /api/users/{id}
    DELETE /api/users/{id}
    GET    /api/users/{id}/services
    POST   /api/users/{id}/services                 link one service
    PUT    /api/users/{id}/services                 replace all links
    DELETE /api/users/{id}/services/{serviceName}   unlink one service
"""

from fastapi import APIRouter, Depends, Response, status

from cache_admin.api.dependencies import UserServiceDep
from cache_admin.api.schemas import ServiceLink, ServiceLinks, ServiceRead, UserCreate, UserRead, UserUpdate
from cache_admin.auth.dependencies import require_roles
from cache_admin.domain.roles import Role

router = APIRouter(
    prefix="/api/users",
    tags=["Users"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
    responses={
        401: {"description": "Missing or invalid bearer token"},
        403: {"description": "Caller is not an Admin"},
    },
)

NOT_FOUND = {404: {"description": "User not found"}}


@router.get("", response_model=list[UserRead], summary="List users")
async def list_users(users: UserServiceDep) -> list[UserRead]:
    return [UserRead.model_validate(user) for user in await users.get_all()]


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Email already registered"}, 404: {"description": "Linked service not found"}},
    summary="Create a user",
)
async def create_user(body: UserCreate, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.create(body))


@router.get("/{user_id}", response_model=UserRead, responses=NOT_FOUND, summary="Get a user")
async def get_user(user_id: str, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.get_by_id(user_id))


@router.put(
    "/{user_id}",
    response_model=UserRead,
    responses={**NOT_FOUND, 400: {"description": "Email used by another user"}},
    summary="Update a user",
)
async def update_user(user_id: str, body: UserUpdate, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.update(user_id, body))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=NOT_FOUND,
    summary="Delete a user",
)
async def delete_user(user_id: str, users: UserServiceDep) -> Response:
    await users.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{user_id}/services",
    response_model=list[ServiceRead],
    responses=NOT_FOUND,
    summary="List services linked to a user",
)
async def list_linked_services(user_id: str, users: UserServiceDep) -> list[ServiceRead]:
    return [ServiceRead.model_validate(service) for service in await users.get_linked_services(user_id)]


@router.post(
    "/{user_id}/services",
    response_model=UserRead,
    responses={**NOT_FOUND, 400: {"description": "Service already linked"}},
    summary="Link a service to a user",
)
async def link_service(user_id: str, body: ServiceLink, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.link_service(user_id, body.service_name))


@router.put(
    "/{user_id}/services",
    response_model=UserRead,
    responses=NOT_FOUND,
    summary="Replace the services linked to a user",
)
async def replace_linked_services(user_id: str, body: ServiceLinks, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.replace_linked_services(user_id, body.service_names))


@router.delete(
    "/{user_id}/services/{service_name}",
    response_model=UserRead,
    responses={**NOT_FOUND, 400: {"description": "Service not linked"}},
    summary="Unlink a service from a user",
)
async def unlink_service(user_id: str, service_name: str, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.unlink_service(user_id, service_name))
