"""Listing of objects a user can reach through the sharing hierarchy."""

from openfga_demo.authz.client import AuthzError, list_objects
from openfga_demo.authz.objects import (
    RESOURCE,
    SERVICE,
    SERVICE_TYPE,
    SHAREABLE_TYPES,
    parse_resource,
    parse_service,
    parse_service_type,
)
from openfga_demo.core.logging import get_logger
from openfga_demo.schemas.listing import (
    ListObjectsResponse,
    SharedResource,
    SharedResourcesResponse,
    SharedService,
    SharedServiceType,
)

logger = get_logger(__name__)

PERMISSION_LEVELS = ("viewer", "editor", "admin")
SHARED_VIA = "parent_organization"


class ListingError(Exception):
    def __init__(self, cause: AuthzError):
        self.message = cause.message
        super().__init__(cause.message)


async def list_user_objects(
    user_id: str,
    object_type: str = RESOURCE,
    relation: str = "viewer",
) -> ListObjectsResponse:
    logger.info(
        "Listing objects",
        user_id=user_id,
        object_type=object_type,
        relation=relation,
    )
    try:
        objects = await list_objects(user_id, relation, object_type)
    except AuthzError as e:
        logger.error("Error listing objects", user_id=user_id, error=e.message)
        raise ListingError(e) from e

    logger.info("Objects found", user_id=user_id, object_type=object_type, count=len(objects))
    return ListObjectsResponse(
        objects=objects,
        total_count=len(objects),
        object_type=object_type,
        relation=relation,
    )


def _entry(object_type: str, obj: str, relation: str):
    """Build a shared entry for an object id, or None if it does not parse."""
    if object_type == SERVICE:
        name = parse_service(obj)
        if name is None:
            return None
        return SharedService(id=obj, name=name, shared_via=SHARED_VIA, permissions=[relation])

    if object_type == SERVICE_TYPE:
        parsed = parse_service_type(obj)
        if parsed is None:
            return None
        service_name, service_type = parsed
        return SharedServiceType(
            id=obj,
            service_name=service_name,
            service_type=service_type,
            shared_via=SHARED_VIA,
            permissions=[relation],
        )

    key = parse_resource(obj)
    if key is None:
        return None
    return SharedResource(
        id=obj,
        service_name=key.service_name,
        service_type=key.service_type,
        org_id=key.org_id,
        resource_name=key.name,
        shared_via=SHARED_VIA,
        permissions=[relation],
    )


async def get_shared_resources(user_id: str) -> SharedResourcesResponse:
    """Collect every service, service type and resource the user can reach.

    Runs one ListObjects query per (type, permission level). A failing query
    is logged and skipped so the remaining levels are still reported.
    Entries for the same object are merged into one with the union of
    permissions.
    """
    logger.info("Getting shared resources", user_id=user_id)

    merged: dict[str, dict] = {object_type: {} for object_type in SHAREABLE_TYPES}

    for object_type in SHAREABLE_TYPES:
        for relation in PERMISSION_LEVELS:
            try:
                objects = await list_objects(user_id, relation, object_type)
            except AuthzError as e:
                logger.warning(
                    "Error listing objects",
                    object_type=object_type,
                    relation=relation,
                    error=e.message,
                )
                continue

            for obj in objects:
                existing = merged[object_type].get(obj)
                if existing is not None:
                    existing.permissions = sorted(set(existing.permissions) | {relation})
                    continue
                entry = _entry(object_type, obj, relation)
                if entry is None:
                    logger.debug("Skipping unparseable object", object=obj)
                    continue
                merged[object_type][obj] = entry

    def ordered(object_type: str) -> list:
        return [merged[object_type][k] for k in sorted(merged[object_type])]

    return SharedResourcesResponse(
        services=ordered(SERVICE),
        service_types=ordered(SERVICE_TYPE),
        resources=ordered(RESOURCE),
    )
