"""Generic create/read/update/delete for REST-backed resources.

Each resource supplies an unpack function (state -> payload, key), a pack
function (payload -> state) and a constructor for an empty payload; the
functions here turn those into the lifecycle callbacks of a Resource.

Create and update are always followed by a read so that values the
server computed or defaulted end up in state.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from ..client.errors import APIError
from ..client.http import ArtifactoryClient, Context, retry_on_400, retry_on_merge_error
from ..common.logger import get_logger
from ..resource.data import ResourceData
from ..resource.definition import CrudFunc, ExistsFunc, Resource
from ..resource.marshal import PackFunc, decode_into, to_wire
from ..resource.schema import Attribute

logger = get_logger("repo_crud")

UnpackFunc = Callable[[ResourceData], Tuple[Any, str]]
Constructor = Callable[[], Any]


@dataclass(frozen=True)
class RestEndpoint:
    """Where a resource lives and which verbs create and update it."""

    path: str
    create_method: str = "PUT"
    create_on_collection: bool = False
    update_method: str = "POST"

    def item(self, id: str) -> str:
        return f"{self.path}{id}"

    def create_target(self, key: str) -> str:
        if self.create_on_collection:
            return self.path.rstrip("/")
        return self.item(key)


REPOSITORIES = RestEndpoint("artifactory/api/repositories/")


def mk_repo_create(
    unpack: UnpackFunc, read: CrudFunc, endpoint: RestEndpoint = REPOSITORIES
) -> CrudFunc:
    def create(ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        repo, key = unpack(d)
        logger.info(f"Creating {endpoint.item(key)}")
        client.request(
            endpoint.create_method,
            endpoint.create_target(key),
            json=to_wire(repo),
            retry_conditions=[retry_on_merge_error],
            ctx=ctx,
        )
        d.set_id(key)
        read(ctx, d, client)

    return create


def mk_repo_read(
    pack: PackFunc, construct: Constructor, endpoint: RestEndpoint = REPOSITORIES
) -> CrudFunc:
    def read(ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        repo = construct()
        try:
            response = client.get(endpoint.item(d.id), ctx=ctx)
        except APIError as e:
            if e.is_not_found:
                logger.info(f"{endpoint.item(d.id)} not found, removing from state")
                d.set_id("")
                return
            raise
        decode_into(repo, response.json())
        pack(repo, d)

    return read


def mk_repo_update(
    unpack: UnpackFunc, read: CrudFunc, endpoint: RestEndpoint = REPOSITORIES
) -> CrudFunc:
    def update(ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        repo, key = unpack(d)
        logger.info(f"Updating {endpoint.item(d.id)}")
        client.request(
            endpoint.update_method,
            endpoint.item(d.id),
            json=to_wire(repo),
            retry_conditions=[retry_on_merge_error],
            ctx=ctx,
        )
        d.set_id(key)
        read(ctx, d, client)

    return update


def mk_repo_delete(endpoint: RestEndpoint = REPOSITORIES) -> CrudFunc:
    def delete(ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        try:
            client.delete(endpoint.item(d.id), ctx=ctx)
        except APIError as e:
            if not e.is_not_found:
                raise
            logger.info(f"{endpoint.item(d.id)} already gone")
        d.set_id("")

    return delete


def mk_repo_exists(endpoint: RestEndpoint = REPOSITORIES) -> ExistsFunc:
    def exists(ctx: Context, d: ResourceData, client: ArtifactoryClient) -> bool:
        try:
            client.head(endpoint.item(d.id), retry_conditions=[retry_on_400], ctx=ctx)
        except APIError as e:
            # Artifactory answers 400 rather than 404 for some missing repos
            if e.status_code in (400, 404):
                return False
            raise
        return True

    return exists


def mk_resource_schema(
    schema: Dict[str, Attribute],
    pack: PackFunc,
    unpack: UnpackFunc,
    construct: Constructor,
    endpoint: RestEndpoint = REPOSITORIES,
    with_exists: bool = False,
    deprecation_message: str = "",
) -> Resource:
    """Assemble a Resource from its schema and marshalling functions."""
    read = mk_repo_read(pack, construct, endpoint)
    return Resource(
        schema=schema,
        create_context=mk_repo_create(unpack, read, endpoint),
        read_context=read,
        update_context=mk_repo_update(unpack, read, endpoint),
        delete_context=mk_repo_delete(endpoint),
        exists_context=mk_repo_exists(endpoint) if with_exists else None,
        deprecation_message=deprecation_message,
    )
