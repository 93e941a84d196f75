"""Logical keys for the resources and run facts the bootstrap resolves."""

from __future__ import annotations

from enum import StrEnum

GLOBAL_NAMESPACE: str = "global"


class ResourceKey(StrEnum):
    """One of the fixed infrastructure resource kinds.

    The value doubles as the cache key within a bootstrap tag namespace.
    """

    NETWORK = "network"
    INTERNET_GATEWAY = "internet-gateway"
    PUBLIC_SUBNET = "public-subnet"
    PRIVATE_SUBNET = "private-subnet"
    SECURITY_GROUP = "security-group"
    SSH_KEY = "ssh-key-name"
    INSTANCE = "instance"

    @property
    def override_variable(self) -> str | None:
        """Environment variable that pins this resource, if any."""
        return _OVERRIDE_VARIABLES.get(self)

    @property
    def resource_type(self) -> str:
        """Provider resource type used for tag discovery."""
        return _RESOURCE_TYPES[self]


class RunFact(StrEnum):
    """Non-resource values resolved once per run."""

    USERNAME = "username"
    UUID = "uuid"
    AMI = "ami"

    @property
    def override_variable(self) -> str:
        return _FACT_VARIABLES[self]


TAG_VARIABLE: str = "BOOTSTRAP_TAG"

_OVERRIDE_VARIABLES: dict[ResourceKey, str] = {
    ResourceKey.NETWORK: "BOOTSTRAP_VPC_ID",
    ResourceKey.INTERNET_GATEWAY: "BOOTSTRAP_INTERNET_GATEWAY_ID",
    ResourceKey.PUBLIC_SUBNET: "BOOTSTRAP_PUBLIC_SUBNET_ID",
    ResourceKey.PRIVATE_SUBNET: "BOOTSTRAP_PRIVATE_SUBNET_ID",
    ResourceKey.SECURITY_GROUP: "BOOTSTRAP_JUMPBOX_SECURITY_GROUP",
    ResourceKey.INSTANCE: "BOOTSTRAP_JUMPBOX_ID",
}

_RESOURCE_TYPES: dict[ResourceKey, str] = {
    ResourceKey.NETWORK: "vpc",
    ResourceKey.INTERNET_GATEWAY: "internet-gateway",
    ResourceKey.PUBLIC_SUBNET: "subnet",
    ResourceKey.PRIVATE_SUBNET: "subnet",
    ResourceKey.SECURITY_GROUP: "security-group",
    ResourceKey.SSH_KEY: "key-pair",
    ResourceKey.INSTANCE: "instance",
}

_FACT_VARIABLES: dict[RunFact, str] = {
    RunFact.USERNAME: "BOOTSTRAP_USERNAME",
    RunFact.UUID: "BOOTSTRAP_UUID",
    RunFact.AMI: "BOOTSTRAP_AMI",
}
