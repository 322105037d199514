"""Routes listing what a user can reach through OpenFGA."""

from fastapi import APIRouter, HTTPException, Query, status

from openfga_demo.api.deps import RequestID, RequireUser
from openfga_demo.core.logging import get_logger
from openfga_demo.schemas.listing import ListObjectsResponse, SharedResourcesResponse
from openfga_demo.services.listing import ListingError, get_shared_resources, list_user_objects

router = APIRouter(prefix="/api", tags=["listing"])
logger = get_logger(__name__)


@router.get("/list-objects", response_model=ListObjectsResponse)
async def list_objects(
    user: RequireUser,
    request_id: RequestID,
    object_type: str = Query("resource", min_length=1),
    relation: str = Query("viewer", min_length=1),
) -> ListObjectsResponse:
    """List objects of one type the caller holds a relation to.

    Defaults to resources the caller can view.
    """
    try:
        return await list_user_objects(user.user_id, object_type=object_type, relation=relation)
    except ListingError as e:
        logger.error("List objects failed", request_id=request_id, error=e.message)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "Failed to list objects", "message": e.message},
        )


@router.get("/shared-resources", response_model=SharedResourcesResponse)
async def shared_resources(user: RequireUser) -> SharedResourcesResponse:
    """Get services, service types and resources shared with the caller."""
    return await get_shared_resources(user.user_id)
