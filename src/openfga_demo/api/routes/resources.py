"""Resource API routes."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from openfga_demo.api.deps import RequireUser
from openfga_demo.authz.objects import ResourceKey
from openfga_demo.core.logging import get_logger
from openfga_demo.schemas.resources import (
    ErrorDetail,
    ResourceActionResponse,
    ResourceCreatedResponse,
    ResourceResponse,
)
from openfga_demo.services.resources import (
    ResourceError,
    create_resource,
    delete_resource,
    get_resource,
    update_resource,
)

router = APIRouter(
    prefix="/api/resource",
    tags=["resources"],
    responses={
        401: {"model": ErrorDetail},
        403: {"model": ErrorDetail},
        422: {"model": ErrorDetail},
        500: {"model": ErrorDetail},
    },
)
logger = get_logger(__name__)

RESOURCE_PATH = "/{service_name}/{service_type}/{org_id}/{name}"


def resource_key(service_name: str, service_type: str, org_id: str, name: str) -> ResourceKey:
    return ResourceKey(
        service_name=service_name,
        service_type=service_type,
        org_id=org_id,
        name=name,
    )


Resource = Annotated[ResourceKey, Depends(resource_key)]


async def json_payload(request: Request, user: RequireUser) -> dict[str, Any]:
    """Parse the request body as a JSON object.

    Depends on the authenticated user so that a request without
    X-User-Id is rejected before its body is looked at.
    """
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        logger.warning("Rejected request body", user_id=user.user_id, path=request.url.path)
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "Invalid request body", "message": "Request body must be a JSON object"},
        )
    return payload


Payload = Annotated[dict[str, Any], Depends(json_payload)]


def _handle_resource_error(error: ResourceError) -> HTTPException:
    """Convert resource errors to HTTP exceptions."""
    status_map = {
        "permission_denied": status.HTTP_403_FORBIDDEN,
    }
    return HTTPException(
        status_code=status_map.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail={"error": error.error, "message": error.message},
    )


@router.post(
    RESOURCE_PATH,
    response_model=ResourceCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create(resource: Resource, payload: Payload, user: RequireUser) -> ResourceCreatedResponse:
    """Create a resource.

    Requires the admin relation on the resource's organisation.
    """
    try:
        result = await create_resource(user.user_id, resource, payload)
    except ResourceError as e:
        raise _handle_resource_error(e)
    return ResourceCreatedResponse(**result)


@router.get(RESOURCE_PATH, response_model=ResourceResponse)
async def get(resource: Resource, user: RequireUser) -> ResourceResponse:
    try:
        result = await get_resource(user.user_id, resource)
    except ResourceError as e:
        raise _handle_resource_error(e)
    return ResourceResponse(**result)


@router.put(RESOURCE_PATH, response_model=ResourceActionResponse)
async def update(resource: Resource, payload: Payload, user: RequireUser) -> ResourceActionResponse:
    try:
        result = await update_resource(user.user_id, resource, payload)
    except ResourceError as e:
        raise _handle_resource_error(e)
    return ResourceActionResponse(**result)


@router.delete(RESOURCE_PATH, response_model=ResourceActionResponse)
async def delete(resource: Resource, user: RequireUser) -> ResourceActionResponse:
    """Delete a resource. Only its owner may delete it."""
    try:
        result = await delete_resource(user.user_id, resource)
    except ResourceError as e:
        raise _handle_resource_error(e)
    return ResourceActionResponse(**result)
