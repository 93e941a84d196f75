"""Provider-agnostic gateway interface consumed by the resolver."""

from __future__ import annotations

import logging
from typing import Protocol

logger: logging.Logger = logging.getLogger(__name__)


class TaggedResource:
    """A resource returned by a tag lookup."""

    def __init__(self, resource_id: str, resource_type: str) -> None:
        self.resource_id: str = resource_id
        self.resource_type: str = resource_type


class InternetGateway:
    """An internet gateway and the networks it is attached to."""

    def __init__(self, gateway_id: str, attachments: list[str]) -> None:
        self.gateway_id: str = gateway_id
        self.attachments: list[str] = attachments

    def attached_to(self, network_id: str) -> bool:
        return network_id in self.attachments


class Subnet:
    """A subnet and the tags it currently carries."""

    def __init__(
        self,
        subnet_id: str,
        tags: dict[str, str] | None = None,
        map_public_ip_on_launch: bool = False,
    ) -> None:
        self.subnet_id: str = subnet_id
        self.tags: dict[str, str] = tags or {}
        self.map_public_ip_on_launch: bool = map_public_ip_on_launch

    def named(self, name: str) -> bool:
        """Return whether the subnet's Name tag equals ``name``."""
        return self.tags.get("Name") == name


class InstanceSpec:
    """Launch parameters for the bootstrap instance.

    Args:
        image_id: Machine image to boot.
        instance_type: Provider instance size.
        key_name: Name of the imported SSH key pair.
        client_token: Deduplication token; identical tokens collapse into one instance.
        subnet_id: Subnet for the primary network interface.
        security_group_ids: Groups attached to the primary network interface.
    """

    def __init__(
        self,
        image_id: str,
        instance_type: str,
        key_name: str,
        client_token: str,
        subnet_id: str,
        security_group_ids: list[str],
    ) -> None:
        self.image_id: str = image_id
        self.instance_type: str = instance_type
        self.key_name: str = key_name
        self.client_token: str = client_token
        self.subnet_id: str = subnet_id
        self.security_group_ids: list[str] = security_group_ids


class ProviderGateway(Protocol):
    """Create, describe and tag the cloud resources of a bootstrap."""

    def create_network(self, cidr_block: str) -> str: ...

    def create_internet_gateway(self) -> str: ...

    def attach_internet_gateway(self, gateway_id: str, network_id: str) -> None: ...

    def create_subnet(self, network_id: str, cidr_block: str) -> Subnet: ...

    def create_security_group(self, name: str, network_id: str) -> str: ...

    def create_instance(self, spec: InstanceSpec) -> str: ...

    def tagged(self, resource_type: str, value: str) -> list[TaggedResource]: ...

    def assign_name(self, value: str, resource_id: str) -> None: ...

    def internet_gateways(self) -> list[InternetGateway]: ...

    def subnet(self, network_id: str, cidr_block: str) -> Subnet | None: ...

    def ingress_permitted(self, protocol: str, port: int, cidr: str, group_id: str) -> bool: ...

    def authorize_ingress(self, protocol: str, port: int, cidr: str, group_id: str) -> bool: ...

    def map_public_ip_on_launch(self, subnet_id: str) -> bool: ...

    def set_map_public_ip_on_launch(self, subnet_id: str, enabled: bool) -> bool: ...

    def latest_base_image(self, release: str) -> str | None: ...

    def import_key_pair(self, name: str, public_key: str) -> str: ...

    def key_pair(self, name: str) -> str | None: ...

    def caller_username(self) -> str | None: ...
