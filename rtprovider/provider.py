"""Provider assembly.

Builds the resource table and turns a provider configuration block into
the shared ArtifactoryClient handed to every resource operation.
"""

from typing import Any, Dict, List, Mapping, Optional

import httpx

from . import __version__
from .client.errors import APIError, ConfigurationError
from .client.http import ArtifactoryClient, Context, build_client
from .common.config import ProviderConfig, parse_config
from .common.logger import get_logger, setup_logger
from .common.settings import ProviderSettings
from .repos.registry import ResourceRegistry, register_repository_resources
from .resource.definition import Resource
from .resource.schema import Attribute, AttrType, Diagnostic, validate_config
from .resource.validators import is_url_with_http_or_https
from .xray import xray_resources

logger = get_logger("provider")

USAGE_PATH = "artifactory/api/system/usage"
PARTNER_FEATURE_ID = "Partner/ACC-007450"
DEFAULT_HOST_VERSION = "0.11+compatible"
# Nested blocks read by parse_config rather than the attribute schema
CONFIG_SECTIONS = ("http", "logging")


def provider_schema() -> Dict[str, Attribute]:
    return {
        "url": Attribute(AttrType.STRING, optional=True, validate=is_url_with_http_or_https),
        "username": Attribute(AttrType.STRING, optional=True),
        "password": Attribute(AttrType.STRING, optional=True, sensitive=True),
        "api_key": Attribute(
            AttrType.STRING,
            optional=True,
            sensitive=True,
            deprecated=(
                "Xray and projects do not support api_key. "
                "Prefer access_token or username and password."
            ),
        ),
        "access_token": Attribute(
            AttrType.STRING,
            optional=True,
            sensitive=True,
            description=(
                "This is a bearer token that can be given to you by your admin "
                "under `Identity and Access`"
            ),
        ),
    }


def _conflicts(values: Mapping[str, Any]) -> List[Diagnostic]:
    diagnostics: List[Diagnostic] = []
    if values.get("access_token") and (values.get("api_key") or values.get("password")):
        diagnostics.append(
            Diagnostic('"access_token" conflicts with "api_key" and "password"', "access_token")
        )
    if values.get("api_key") and values.get("password"):
        diagnostics.append(Diagnostic('"api_key" conflicts with "password"', "api_key"))
    return diagnostics


def send_usage(client: ArtifactoryClient, host_version: str, ctx: Optional[Context] = None) -> None:
    """Report provider usage to the server.

    Raises:
        ConfigurationError: If the report could not be delivered
    """
    body = {
        "productId": f"rtprovider/{__version__}",
        "features": [
            {"featureId": PARTNER_FEATURE_ID},
            {"featureId": f"Terraform/{host_version}"},
        ],
    }
    try:
        client.post(USAGE_PATH, json=body, ctx=ctx)
    except APIError as e:
        raise ConfigurationError(f"unable to report usage {e}") from e


class Provider:
    """The provider: a configuration schema plus a table of resources."""

    def __init__(self, registry: Optional[ResourceRegistry] = None):
        if registry is None:
            registry = ResourceRegistry()
            register_repository_resources(registry)
            registry.register_all(xray_resources())
        self.registry = registry
        self.schema = provider_schema()

    @property
    def resources(self) -> Dict[str, Resource]:
        return self.registry.as_dict()

    def resource(self, name: str) -> Resource:
        resource = self.registry.get_resource(name)
        if resource is None:
            raise KeyError(f"unknown resource type: {name}")
        return resource

    def validate(self, values: Mapping[str, Any]) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for section in CONFIG_SECTIONS:
            value = values.get(section)
            if value is not None and not isinstance(value, Mapping):
                diagnostics.append(Diagnostic(f"{section}: expected a mapping", section))
        attributes = {k: v for k, v in values.items() if k not in CONFIG_SECTIONS}
        return diagnostics + validate_config(self.schema, attributes) + _conflicts(values)

    def configure(
        self,
        values: Mapping[str, Any],
        host_version: str = "",
        settings: Optional[ProviderSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        ctx: Optional[Context] = None,
    ) -> ArtifactoryClient:
        """Build the shared client from a provider configuration block.

        Args:
            values: Provider block values; missing ones fall back to the environment
            host_version: Version of the declarative tool, for usage reporting
            settings: Environment defaults (read from the environment if None)
            transport: Optional httpx transport (used by tests)
            ctx: Cancellation context for the usage report

        Returns:
            Configured ArtifactoryClient

        Raises:
            ConfigurationError: If the URL or credentials are missing, or the
                usage report fails
        """
        config: ProviderConfig = parse_config(dict(values), settings)
        setup_logger(
            "rtprovider",
            log_dir=config.logging.log_dir,
            level=config.logging.level,
            file_logging=config.logging.file_logging,
        )

        if not config.url:
            raise ConfigurationError("you must supply a URL")

        client = build_client(
            config.url,
            username=config.username,
            password=config.password,
            api_key=config.api_key,
            access_token=config.access_token,
            http=config.http,
            transport=transport,
        )
        logger.info(f"Configured client for {client.base_url}")

        try:
            send_usage(client, host_version or DEFAULT_HOST_VERSION, ctx)
        except ConfigurationError:
            client.close()
            raise
        return client
