"""
Self-service routes for the authenticated user.

    GET    /api/profile
    GET    /api/profile/services
    POST   /api/profile/services
    PUT    /api/profile/services
    DELETE /api/profile/services/{serviceName}
"""

from fastapi import APIRouter

from cache_admin.api.dependencies import UserServiceDep
from cache_admin.api.schemas import ServiceLink, ServiceLinks, ServiceRead, UserRead
from cache_admin.auth.dependencies import CurrentUser

router = APIRouter(
    prefix="/api/profile",
    tags=["Profile"],
    responses={401: {"description": "Missing or invalid bearer token"}},
)


@router.get("", response_model=UserRead, summary="Get my profile")
async def get_profile(user: CurrentUser, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.get_by_id(user.id))


@router.get("/services", response_model=list[ServiceRead], summary="List my services")
async def list_my_services(user: CurrentUser, users: UserServiceDep) -> list[ServiceRead]:
    return [ServiceRead.model_validate(service) for service in await users.get_linked_services(user.id)]


@router.post("/services", response_model=UserRead, summary="Link a service to my account")
async def link_my_service(body: ServiceLink, user: CurrentUser, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.link_service(user.id, body.service_name))


@router.put("/services", response_model=UserRead, summary="Replace my linked services")
async def replace_my_services(body: ServiceLinks, user: CurrentUser, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.replace_linked_services(user.id, body.service_names))


@router.delete("/services/{service_name}", response_model=UserRead, summary="Unlink a service from my account")
async def unlink_my_service(service_name: str, user: CurrentUser, users: UserServiceDep) -> UserRead:
    return UserRead.model_validate(await users.unlink_service(user.id, service_name))
