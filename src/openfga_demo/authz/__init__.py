"""OpenFGA authorization module."""

from openfga_demo.authz.client import (
    AuthzError,
    AuthzUnavailableError,
    RelationTuple,
    check_permission,
    delete_tuples,
    get_openfga_client,
    list_objects,
    write_tuples,
)

__all__ = [
    "AuthzError",
    "AuthzUnavailableError",
    "RelationTuple",
    "check_permission",
    "delete_tuples",
    "get_openfga_client",
    "list_objects",
    "write_tuples",
]
