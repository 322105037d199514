"""OpenFGA client wrapper for authorization operations."""

import asyncio
import json
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple

import aiohttp
import httpx
from openfga_sdk import ClientConfiguration, OpenFgaClient
from openfga_sdk.client.models import (
    ClientCheckRequest,
    ClientListObjectsRequest,
    ClientTuple,
    ClientWriteRequest,
)
from openfga_sdk.exceptions import ApiException, FgaValidationException
from openfga_sdk.models import (
    CreateStoreRequest,
    ReadRequestTupleKey,
    WriteAuthorizationModelRequest,
)

from openfga_demo.authz.objects import format_user
from openfga_demo.core.config import settings
from openfga_demo.core.logging import get_logger

logger = get_logger(__name__)

MODEL_PATH = Path(__file__).parent / "model.json"

# OpenFGA rejects writes with more tuples than this
MAX_TUPLES_PER_WRITE = 100

# Global client instance
_client: OpenFgaClient | None = None
_store_id: str | None = None
_model_id: str | None = None

# Serialises store/model resolution so concurrent first requests create one store
_init_lock = asyncio.Lock()


class AuthzError(Exception):
    """An OpenFGA request failed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthzUnavailableError(AuthzError):
    """The OpenFGA server could not be reached."""

    def __init__(self):
        super().__init__(
            "OpenFGA server is not available. Please check server status and configuration."
        )


class AuthzConfigurationError(AuthzError):
    """Store or authorization model is not configured."""


class RelationTuple(NamedTuple):
    """A (user, relation, object) relationship record."""

    user: str
    relation: str
    object: str

    def __str__(self) -> str:
        return f"{self.user} {self.relation} {self.object}"

    def to_client_tuple(self) -> ClientTuple:
        return ClientTuple(user=self.user, relation=self.relation, object=self.object)


@contextmanager
def _openfga_errors(operation: str) -> Iterator[None]:
    """Translate SDK and transport failures into AuthzError."""
    try:
        yield
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
        logger.error("OpenFGA server appears to be unavailable", operation=operation, error=str(e))
        logger.error(
            "Check that the OpenFGA server is running and reachable",
            openfga_url=settings.OPENFGA_CLIENT_URL,
            hint="set OPENFGA_CLIENT_URL (default: http://localhost:8080)",
        )
        raise AuthzUnavailableError() from e
    except (ApiException, FgaValidationException) as e:
        logger.error("OpenFGA request failed", operation=operation, error=str(e))
        raise AuthzError(f"OpenFGA {operation} failed: {e}") from e


async def get_openfga_client() -> OpenFgaClient:
    """Get or create OpenFGA client instance."""
    global _client
    if _client is None:
        logger.info("Connecting to OpenFGA", openfga_url=settings.OPENFGA_CLIENT_URL)
        configuration = ClientConfiguration(
            api_url=settings.OPENFGA_CLIENT_URL,
            store_id=settings.OPENFGA_STORE_ID,
            authorization_model_id=settings.OPENFGA_AUTH_MODEL_ID,
        )
        _client = OpenFgaClient(configuration)
    return _client


async def _resolve_store(client: OpenFgaClient) -> str:
    if settings.OPENFGA_STORE_ID:
        return settings.OPENFGA_STORE_ID
    if not settings.OPENFGA_BOOTSTRAP:
        raise AuthzConfigurationError("OpenFGA store ID not configured")

    stores = await client.list_stores()
    store = next(
        (s for s in (stores.stores or []) if s.name == settings.OPENFGA_STORE_NAME),
        None,
    )
    if store:
        logger.info("Using existing OpenFGA store", store_id=store.id)
        return store.id

    response = await client.create_store(CreateStoreRequest(name=settings.OPENFGA_STORE_NAME))
    logger.info("Created new OpenFGA store", store_id=response.id)
    return response.id


async def _resolve_model(client: OpenFgaClient) -> str:
    if settings.OPENFGA_AUTH_MODEL_ID:
        return settings.OPENFGA_AUTH_MODEL_ID
    if not settings.OPENFGA_BOOTSTRAP:
        raise AuthzConfigurationError("OpenFGA authorization model ID not configured")

    # Models are returned newest first
    models = await client.read_authorization_models()
    if models.authorization_models:
        model_id = models.authorization_models[0].id
        logger.info("Using existing authorization model", model_id=model_id)
        return model_id

    return await write_authorization_model()


async def ensure_store_and_model() -> tuple[str, str]:
    """Ensure OpenFGA store and authorization model exist.

    Configured ids win. Without them the store is looked up by name (or
    created) and the latest model is used (or the bundled one written),
    unless OPENFGA_BOOTSTRAP is disabled.

    Returns:
        Tuple of (store_id, model_id)
    """
    global _store_id, _model_id

    if _store_id and _model_id:
        return _store_id, _model_id

    async with _init_lock:
        # Another request may have finished initialisation while we waited
        if _store_id and _model_id:
            return _store_id, _model_id

        client = await get_openfga_client()

        with _openfga_errors("initialisation"):
            _store_id = await _resolve_store(client)
            client.set_store_id(_store_id)
            _model_id = await _resolve_model(client)

        client.set_authorization_model_id(_model_id)

    logger.info("OpenFGA client initialized", store_id=_store_id, model_id=_model_id)
    return _store_id, _model_id


async def write_authorization_model(path: Path = MODEL_PATH) -> str:
    """Write an authorization model from a JSON file and make it current.

    The store must already be selected on the client.

    Returns:
        The new authorization model ID
    """
    global _model_id

    if not path.exists():
        raise AuthzConfigurationError(f"Authorization model not found at {path}")

    with open(path) as f:
        model_data = json.load(f)

    client = await get_openfga_client()
    with _openfga_errors("model write"):
        response = await client.write_authorization_model(
            WriteAuthorizationModelRequest(**model_data)
        )
    _model_id = response.authorization_model_id
    client.set_authorization_model_id(_model_id)
    logger.info("Created authorization model", model_id=_model_id, path=str(path))
    return _model_id


async def check_permission(user_id: str, relation: str, obj: str) -> bool:
    """Check if user has a relation to an object.

    Args:
        user_id: The user ID (formatted as "user:{user_id}" unless typed)
        relation: The relation to check (e.g., "viewer", "editor", "owner")
        obj: The object in "type:id" format

    Returns:
        True if OpenFGA allows the relation

    Raises:
        AuthzUnavailableError: If OpenFGA cannot be reached
        AuthzError: If the check is rejected
    """
    logger.info("Checking permission", user_id=user_id, relation=relation, object=obj)

    await ensure_store_and_model()
    client = await get_openfga_client()

    with _openfga_errors("permission check"):
        response = await client.check(
            ClientCheckRequest(user=format_user(user_id), relation=relation, object=obj)
        )

    allowed = bool(response.allowed)
    logger.info(
        "Permission check result",
        user_id=user_id,
        relation=relation,
        object=obj,
        allowed=allowed,
    )
    return allowed


async def list_objects(user_id: str, relation: str, object_type: str) -> list[str]:
    """List all objects of a type a user has a specific relation to.

    Returns:
        Object identifiers in "type:id" format
    """
    await ensure_store_and_model()
    client = await get_openfga_client()

    with _openfga_errors("list objects"):
        response = await client.list_objects(
            ClientListObjectsRequest(
                user=format_user(user_id),
                relation=relation,
                type=object_type,
            )
        )
    return list(response.objects or [])


def _chunks(tuples: list[RelationTuple]) -> Iterator[list[RelationTuple]]:
    for start in range(0, len(tuples), MAX_TUPLES_PER_WRITE):
        yield tuples[start:start + MAX_TUPLES_PER_WRITE]


async def write_tuples(tuples: Iterable[RelationTuple]) -> int:
    """Write relationship tuples, chunked to the server's per-request limit.

    Returns:
        Number of tuples written
    """
    tuples = list(tuples)
    await ensure_store_and_model()
    client = await get_openfga_client()

    for chunk in _chunks(tuples):
        with _openfga_errors("tuple write"):
            await client.write(
                ClientWriteRequest(writes=[t.to_client_tuple() for t in chunk])
            )
    logger.info("Relationships written", count=len(tuples))
    return len(tuples)


async def delete_tuples(tuples: Iterable[RelationTuple]) -> int:
    """Delete relationship tuples.

    Returns:
        Number of tuples deleted
    """
    tuples = list(tuples)
    await ensure_store_and_model()
    client = await get_openfga_client()

    for chunk in _chunks(tuples):
        with _openfga_errors("tuple delete"):
            await client.write(
                ClientWriteRequest(deletes=[t.to_client_tuple() for t in chunk])
            )
    logger.info("Relationships deleted", count=len(tuples))
    return len(tuples)


async def read_tuples(
    user: str | None = None,
    relation: str | None = None,
    obj: str | None = None,
) -> list[RelationTuple]:
    """Read every stored tuple matching a (partial) key.

    Follows continuation tokens until the server reports no further pages.
    """
    await ensure_store_and_model()
    client = await get_openfga_client()

    body = ReadRequestTupleKey(user=user, relation=relation, object=obj)
    tuples: list[RelationTuple] = []
    token: str | None = None
    while True:
        options = {"continuation_token": token} if token else {}
        with _openfga_errors("tuple read"):
            response = await client.read(body, options)
        tuples.extend(
            RelationTuple(t.key.user, t.key.relation, t.key.object)
            for t in (response.tuples or [])
        )
        token = response.continuation_token
        if not token:
            return tuples


async def check_openfga_health() -> bool:
    """Probe the OpenFGA HTTP health endpoint."""
    try:
        async with httpx.AsyncClient(timeout=settings.OPENFGA_TIMEOUT_SECONDS) as http:
            response = await http.get(f"{settings.OPENFGA_CLIENT_URL}/healthz")
        return response.status_code == 200
    except httpx.HTTPError as e:
        logger.warning("OpenFGA health check failed", error=str(e))
        return False


async def close_client() -> None:
    """Close the OpenFGA client connection."""
    global _client, _store_id, _model_id
    if _client:
        await _client.close()
    _client = None
    _store_id = None
    _model_id = None
