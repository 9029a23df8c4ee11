"""Resource definitions exposed to the declarative tool."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..client.http import ArtifactoryClient, Context
from ..common.logger import get_logger
from .data import ResourceData
from .schema import Attribute, Diagnostic, ValidationError, validate_config

logger = get_logger("resource")

CrudFunc = Callable[[Context, ResourceData, ArtifactoryClient], None]
ExistsFunc = Callable[[Context, ResourceData, ArtifactoryClient], bool]
ImportFunc = Callable[[Context, ResourceData, ArtifactoryClient], List[ResourceData]]


def import_state_passthrough(
    ctx: Context, d: ResourceData, client: ArtifactoryClient
) -> List[ResourceData]:
    """Import by id alone; the following read fills in the rest."""
    return [d]


@dataclass
class Resource:
    """One entry of the resource table: schema plus lifecycle functions."""

    schema: Dict[str, Attribute]
    create_context: CrudFunc
    read_context: CrudFunc
    update_context: CrudFunc
    delete_context: CrudFunc
    importer: Optional[ImportFunc] = import_state_passthrough
    exists_context: Optional[ExistsFunc] = None
    deprecation_message: str = ""

    def data(
        self,
        values: Optional[Mapping[str, Any]] = None,
        prior: Optional[Mapping[str, Any]] = None,
        id: str = "",
    ) -> ResourceData:
        return ResourceData(self.schema, values, prior, id)

    def validate(self, d: ResourceData) -> List[Diagnostic]:
        diagnostics = validate_config(self.schema, d.config())
        if self.deprecation_message:
            diagnostics.append(Diagnostic(self.deprecation_message, severity="warning"))
        return diagnostics

    def _check(self, d: ResourceData) -> None:
        errors = [diag for diag in self.validate(d) if diag.severity == "error"]
        if errors:
            raise ValidationError(errors)

    def create(self, ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        self._check(d)
        self.create_context(ctx, d, client)

    def read(self, ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        self.read_context(ctx, d, client)

    def update(self, ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        self._check(d)
        self.update_context(ctx, d, client)

    def delete(self, ctx: Context, d: ResourceData, client: ArtifactoryClient) -> None:
        self.delete_context(ctx, d, client)

    def exists(self, ctx: Context, d: ResourceData, client: ArtifactoryClient) -> bool:
        if self.exists_context is None:
            raise NotImplementedError("resource has no existence probe")
        return self.exists_context(ctx, d, client)

    def import_state(
        self, ctx: Context, d: ResourceData, client: ArtifactoryClient
    ) -> List[ResourceData]:
        if self.importer is None:
            raise NotImplementedError("resource does not support import")
        logger.info(f"Importing resource {d.id}")
        return self.importer(ctx, d, client)
