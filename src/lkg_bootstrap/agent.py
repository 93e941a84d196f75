"""Dependency graph walker for a single bootstrap run."""

from __future__ import annotations

import hashlib
import logging
import uuid as uuid_lib
from collections.abc import Callable
from typing import Any

from lkg_bootstrap.components.gateway import InstanceSpec, ProviderGateway
from lkg_bootstrap.components.state import KeyCache, OverrideSource
from lkg_bootstrap.config import BootstrapConfig
from lkg_bootstrap.errors import ConfigurationError
from lkg_bootstrap.keys import GLOBAL_NAMESPACE, TAG_VARIABLE, ResourceKey, RunFact
from lkg_bootstrap.resolver import ResourceResolver
from lkg_bootstrap.ssh import SshKey

logger: logging.Logger = logging.getLogger(__name__)

JUMPBOX_SECURITY_GROUP: str = "jumpbox"
SSH_PORT: int = 22
ANYWHERE: str = "0.0.0.0/0"


class BootstrapOutputs:
    """Identifiers produced by a completed bootstrap."""

    def __init__(
        self,
        bootstrap_tag: str,
        vpc_id: str,
        internet_gateway_id: str,
        public_subnet_id: str,
        private_subnet_id: str,
        security_group_id: str,
        jumpbox_id: str,
        ssh_key_path: str,
    ) -> None:
        self.bootstrap_tag: str = bootstrap_tag
        self.vpc_id: str = vpc_id
        self.internet_gateway_id: str = internet_gateway_id
        self.public_subnet_id: str = public_subnet_id
        self.private_subnet_id: str = private_subnet_id
        self.security_group_id: str = security_group_id
        self.jumpbox_id: str = jumpbox_id
        self.ssh_key_path: str = ssh_key_path

    def as_dict(self) -> dict[str, str]:
        return dict(vars(self))


class BootstrapAgent:
    """Resolve the bootstrap resources in dependency order, on demand.

    Every accessor is lazy and memoized on this instance: the first call
    resolves the value (and, transitively, its dependencies) through a
    ``ResourceResolver``; later calls return the memoized value without
    touching the cache or the provider. One agent serves one run from a
    single thread of control.
    """

    def __init__(
        self,
        config: BootstrapConfig,
        gateway: ProviderGateway,
        cache: KeyCache,
        overrides: OverrideSource,
        ssh_key_factory: Callable[[str], SshKey] | None = None,
    ) -> None:
        self._config: BootstrapConfig = config
        self._gateway: ProviderGateway = gateway
        self._cache: KeyCache = cache
        self._overrides: OverrideSource = overrides
        self._ssh_key_factory: Callable[[str], SshKey] = ssh_key_factory or (
            lambda name: SshKey(name, config.cache_path / "keys")
        )
        self._memo: dict[str, Any] = {}

    def _memoized(self, name: str, compute: Callable[[], Any]) -> Any:
        if name not in self._memo:
            self._memo[name] = compute()
        return self._memo[name]

    # run facts

    def bootstrap_tag(self) -> str:
        return self._memoized(
            "bootstrap_tag",
            lambda: self._overrides.lookup(TAG_VARIABLE) or f"lkg@{self.username()}/{self.uuid()}",
        )

    def username(self) -> str:
        return self._memoized(
            RunFact.USERNAME, lambda: self._global_resolver.fact(RunFact.USERNAME, self._caller)
        )

    def _caller(self) -> str:
        name = self._gateway.caller_username()
        if not name:
            raise ConfigurationError(
                "Caller identity has no user name; set "
                f"{RunFact.USERNAME.override_variable} or {TAG_VARIABLE}."
            )
        return name

    def uuid(self) -> str:
        return self._memoized(
            RunFact.UUID,
            lambda: self._global_resolver.fact(RunFact.UUID, lambda: str(uuid_lib.uuid4())),
        )

    def ami(self) -> str:
        return self._memoized(RunFact.AMI, lambda: self._resolver.fact(RunFact.AMI, self._base_image))

    def _base_image(self) -> str:
        release = self._config.base_image_release
        image_id = self._gateway.latest_base_image(release)
        if image_id is None:
            raise ConfigurationError(
                f"No base image found for release {release!r}; "
                f"set {RunFact.AMI.override_variable}."
            )
        return image_id

    @property
    def _global_resolver(self) -> ResourceResolver:
        return self._memoized(
            "global_resolver",
            lambda: ResourceResolver(
                lambda: GLOBAL_NAMESPACE, self._overrides, self._cache, self._gateway
            ),
        )

    @property
    def _resolver(self) -> ResourceResolver:
        return self._memoized(
            "resolver",
            lambda: ResourceResolver(
                self.bootstrap_tag, self._overrides, self._cache, self._gateway
            ),
        )

    def _resolve(
        self,
        key: ResourceKey,
        create: Callable[[], str],
        discover: Callable[[], str | None] | None = None,
    ) -> str:
        return self._memoized(key, lambda: self._resolver.resolve(key, create, discover))

    # network

    def network(self) -> str:
        return self._resolve(
            ResourceKey.NETWORK,
            lambda: self._gateway.create_network(self._config.vpc_cidr_block),
        )

    def internet_gateway(self) -> str:
        return self._resolve(
            ResourceKey.INTERNET_GATEWAY,
            self._create_internet_gateway,
            self._find_internet_gateway,
        )

    def _find_internet_gateway(self) -> str | None:
        tagged = self._resolver.discover_tagged(ResourceKey.INTERNET_GATEWAY)
        if tagged is not None:
            return tagged
        network = self.network()
        for gateway in self._gateway.internet_gateways():
            if gateway.attached_to(network):
                return gateway.gateway_id
        return None

    def _create_internet_gateway(self) -> str:
        network = self.network()
        gateway_id = self._gateway.create_internet_gateway()
        self._gateway.attach_internet_gateway(gateway_id, network)
        return gateway_id

    # subnets

    def public_subnet(self) -> str:
        return self._subnet(ResourceKey.PUBLIC_SUBNET, self._config.public_cidr_block)

    def private_subnet(self) -> str:
        return self._subnet(ResourceKey.PRIVATE_SUBNET, self._config.private_cidr_block)

    def subnets(self) -> list[str]:
        """Both subnet ids, public first."""
        return [self.public_subnet(), self.private_subnet()]

    def _subnet(self, key: ResourceKey, cidr_block: str) -> str:
        def discover() -> str | None:
            subnet = self._gateway.subnet(self.network(), cidr_block)
            if subnet is None:
                return None
            tag = self.bootstrap_tag()
            if not subnet.named(tag):
                self._gateway.assign_name(tag, subnet.subnet_id)
            return subnet.subnet_id

        def create() -> str:
            return self._gateway.create_subnet(self.network(), cidr_block).subnet_id

        return self._resolve(key, create, discover)

    def enable_public_ips(self) -> bool:
        """Turn on public IP assignment for the public subnet, once."""
        subnet = self.public_subnet()
        if self._gateway.map_public_ip_on_launch(subnet):
            return True
        logger.info("enabling_public_ips", extra={"subnet_id": subnet})
        return self._gateway.set_map_public_ip_on_launch(subnet, True)

    # security group

    def security_group(self) -> str:
        return self._resolve(
            ResourceKey.SECURITY_GROUP,
            lambda: self._gateway.create_security_group(JUMPBOX_SECURITY_GROUP, self.network()),
        )

    def allow_ssh(self) -> bool:
        """Permit SSH from anywhere into the jumpbox group, once."""
        group = self.security_group()
        if self._gateway.ingress_permitted("tcp", SSH_PORT, ANYWHERE, group):
            return True
        logger.info("allowing_ssh", extra={"security_group_id": group})
        return self._gateway.authorize_ingress("tcp", SSH_PORT, ANYWHERE, group)

    # ssh key

    def ssh_key(self) -> SshKey:
        return self._memoized("ssh_key", lambda: self._ssh_key_factory(self.bootstrap_tag()))

    def ssh_key_name(self) -> str:
        """Name of the uploaded key pair, importing it if needed."""
        name = self.bootstrap_tag()

        def discover() -> str | None:
            tagged = self._resolver.discover_tagged(ResourceKey.SSH_KEY)
            return tagged if tagged is not None else self._gateway.key_pair(name)

        self._resolve(
            ResourceKey.SSH_KEY,
            lambda: self._gateway.import_key_pair(name, self.ssh_key().public_key),
            discover,
        )
        return name

    # instance

    def jumpbox(self) -> str:
        return self._resolve(ResourceKey.INSTANCE, self._create_jumpbox)

    def _create_jumpbox(self) -> str:
        subnet = self.public_subnet()
        group = self.security_group()
        key_name = self.ssh_key_name()
        tag = self.bootstrap_tag()
        return self._gateway.create_instance(
            InstanceSpec(
                image_id=self.ami(),
                instance_type=self._config.instance_type,
                key_name=key_name,
                client_token=hashlib.sha256(tag.encode("utf-8")).hexdigest(),
                subnet_id=subnet,
                security_group_ids=[group],
            )
        )

    def outputs(self) -> BootstrapOutputs:
        """Resolve everything and return the resulting identifiers."""
        public, private = self.subnets()
        return BootstrapOutputs(
            bootstrap_tag=self.bootstrap_tag(),
            vpc_id=self.network(),
            internet_gateway_id=self.internet_gateway(),
            public_subnet_id=public,
            private_subnet_id=private,
            security_group_id=self.security_group(),
            jumpbox_id=self.jumpbox(),
            ssh_key_path=str(self.ssh_key().path),
        )
