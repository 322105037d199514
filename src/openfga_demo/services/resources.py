"""Resource operations gated by OpenFGA permission checks.

Each operation requires one relation on an OpenFGA object:

    create  admin   organisation:{org}
    get     viewer  resource:{service}/{type}/{org}/{name}
    update  editor  resource:...
    delete  owner   resource:...

Resources are not persisted; creating one records its place in the
hierarchy (owner, organisation, parent service type) as tuples so that
inherited access applies to it, and deleting one removes every tuple
stored on it. Creating an existing resource again succeeds and only
writes the tuples it is missing.
"""

from typing import Any

from openfga_demo.authz.client import (
    AuthzError,
    RelationTuple,
    check_permission,
    delete_tuples,
    read_tuples,
    write_tuples,
)
from openfga_demo.authz.objects import ResourceKey, format_user
from openfga_demo.core.logging import get_logger

logger = get_logger(__name__)


class ResourceError(Exception):
    """Base resource error."""

    def __init__(self, message: str, code: str = "resource_error", error: str = "Resource error"):
        self.message = message
        self.code = code
        self.error = error
        super().__init__(message)


class PermissionDeniedError(ResourceError):
    """User lacks the relation the operation requires."""

    def __init__(self, action: str):
        super().__init__(
            f"You do not have permission to {action} this resource",
            "permission_denied",
            "Permission denied",
        )


class PermissionCheckError(ResourceError):
    """OpenFGA could not answer the permission check."""

    def __init__(self, cause: AuthzError):
        super().__init__(cause.message, "permission_check_failed", "Failed to check permission")


def hierarchy_tuples(user_id: str, resource: ResourceKey) -> list[RelationTuple]:
    """Tuples that place a new resource in the sharing hierarchy."""
    return [
        RelationTuple(format_user(user_id), "owner", resource.object),
        RelationTuple(resource.organisation_object, "organisation", resource.object),
        RelationTuple(resource.service_type_object, "parent", resource.object),
    ]


async def _require(user_id: str, relation: str, obj: str, action: str) -> None:
    try:
        allowed = await check_permission(user_id, relation, obj)
    except AuthzError as e:
        logger.error("Error checking permission", user_id=user_id, object=obj, error=e.message)
        raise PermissionCheckError(e) from e

    if not allowed:
        logger.warning(
            "Permission denied",
            user_id=user_id,
            relation=relation,
            object=obj,
        )
        raise PermissionDeniedError(action)

    logger.info("Permission granted", user_id=user_id, relation=relation, object=obj)


async def create_resource(
    user_id: str,
    resource: ResourceKey,
    payload: dict[str, Any],
) -> dict[str, Any]:
    """Create a resource. The user must be an admin of its organisation."""
    logger.info("Creating resource", resource=resource.key, fields=sorted(payload))

    await _require(user_id, "admin", resource.organisation_object, "create")

    # A repeated create only writes the tuples that are not stored yet
    try:
        stored = set(await read_tuples(obj=resource.object))
        missing = [t for t in hierarchy_tuples(user_id, resource) if t not in stored]
        if missing:
            await write_tuples(missing)
        else:
            logger.info("Resource already exists", resource=resource.key)
    except AuthzError as e:
        raise ResourceError(e.message, "tuple_write_failed", "Failed to create resource") from e

    return {
        "message": "Resource created successfully",
        "organisation": resource.org_id,
        "resource_id": resource.key,
    }


async def get_resource(user_id: str, resource: ResourceKey) -> dict[str, Any]:
    logger.info("Getting resource", resource=resource.key)

    await _require(user_id, "viewer", resource.object, "view")

    return {
        "resource_id": resource.key,
        "name": resource.name,
        "service_name": resource.service_name,
        "service_type": resource.service_type,
        "org_id": resource.org_id,
    }


async def update_resource(
    user_id: str,
    resource: ResourceKey,
    payload: dict[str, Any],
) -> dict[str, Any]:
    logger.info("Updating resource", resource=resource.key, fields=sorted(payload))

    await _require(user_id, "editor", resource.object, "update")

    return {
        "message": "Resource updated successfully",
        "resource_id": resource.key,
    }


async def delete_resource(user_id: str, resource: ResourceKey) -> dict[str, Any]:
    """Delete a resource and its stored tuples. Only its owner may do so."""
    logger.info("Deleting resource", resource=resource.key)

    await _require(user_id, "owner", resource.object, "delete")

    try:
        stored = await read_tuples(obj=resource.object)
        if stored:
            await delete_tuples(stored)
    except AuthzError as e:
        raise ResourceError(e.message, "tuple_delete_failed", "Failed to delete resource") from e

    return {
        "message": "Resource deleted successfully",
        "resource_id": resource.key,
    }
