"""OpenFGA object identifiers used by the demo model.

Objects are ``type:id`` strings. Hierarchical ids join their path segments
with ``/``:

    service:connector
    service_type:connector/s3
    resource:connector/s3/org-1/bucket-a
"""

from dataclasses import dataclass

USER = "user"
ORGANISATION = "organisation"
GROUP = "group"
SERVICE = "service"
SERVICE_TYPE = "service_type"
RESOURCE = "resource"

# Object types a user can be granted access to
SHAREABLE_TYPES = (SERVICE, SERVICE_TYPE, RESOURCE)


def make_object(object_type: str, object_id: str) -> str:
    return f"{object_type}:{object_id}"


def format_user(user_id: str) -> str:
    """Return ``user:{user_id}`` unless the id already carries a type."""
    if ":" in user_id:
        return user_id
    return make_object(USER, user_id)


def split_object(obj: str) -> tuple[str, str]:
    """Split ``type:id`` into its parts.

    Raises:
        ValueError: If the object has no type prefix.
    """
    object_type, sep, object_id = obj.partition(":")
    if not sep or not object_type or not object_id:
        raise ValueError(f"Invalid object identifier: {obj!r}")
    return object_type, object_id


def _path(obj: str, expected_type: str, segments: int) -> list[str] | None:
    prefix = f"{expected_type}:"
    if not obj.startswith(prefix):
        return None
    parts = obj[len(prefix):].split("/")
    if len(parts) != segments or not all(parts):
        return None
    return parts


def parse_service(obj: str) -> str | None:
    parts = _path(obj, SERVICE, 1)
    return parts[0] if parts else None


def parse_service_type(obj: str) -> tuple[str, str] | None:
    parts = _path(obj, SERVICE_TYPE, 2)
    return (parts[0], parts[1]) if parts else None


def parse_resource(obj: str) -> "ResourceKey | None":
    parts = _path(obj, RESOURCE, 4)
    return ResourceKey(*parts) if parts else None


@dataclass(frozen=True)
class ResourceKey:
    """Identifies a resource by its place in the service hierarchy."""

    service_name: str
    service_type: str
    org_id: str
    name: str

    @property
    def key(self) -> str:
        return f"{self.service_name}/{self.service_type}/{self.org_id}/{self.name}"

    @property
    def object(self) -> str:
        return make_object(RESOURCE, self.key)

    @property
    def service_type_object(self) -> str:
        return make_object(SERVICE_TYPE, f"{self.service_name}/{self.service_type}")

    @property
    def organisation_object(self) -> str:
        return make_object(ORGANISATION, self.org_id)
