"""Shared fixtures: an in-memory provider gateway and cache."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from lkg_bootstrap.components.gateway import InstanceSpec, InternetGateway, Subnet, TaggedResource
from lkg_bootstrap.config import BootstrapConfig
from lkg_bootstrap.overrides import EnvironmentOverrides

TAG = "lkg@alice/abc"


class FakeGateway:
    """Records every call; answers from configurable in-memory state."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.tags: dict[tuple[str, str], list[str]] = {}
        self.gateways: list[InternetGateway] = []
        self.subnets: dict[tuple[str, str], Subnet] = {}
        self.key_pairs: dict[str, str] = {}
        self.ingress: set[tuple[str, int, str, str]] = set()
        self.public_ips: dict[str, bool] = {}
        self.image_id: str | None = "ami-1"
        self.username: str | None = "alice"
        self._counter = 0

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def _next(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    def create_network(self, cidr_block: str) -> str:
        self._record("create_network", cidr_block)
        return self._next("vpc")

    def create_internet_gateway(self) -> str:
        self._record("create_internet_gateway")
        return self._next("igw")

    def attach_internet_gateway(self, gateway_id: str, network_id: str) -> None:
        self._record("attach_internet_gateway", gateway_id, network_id)

    def create_subnet(self, network_id: str, cidr_block: str) -> Subnet:
        self._record("create_subnet", network_id, cidr_block)
        return Subnet(self._next("subnet"))

    def create_security_group(self, name: str, network_id: str) -> str:
        self._record("create_security_group", name, network_id)
        return self._next("sg")

    def create_instance(self, spec: InstanceSpec) -> str:
        self._record("create_instance", spec)
        return self._next("i")

    def tagged(self, resource_type: str, value: str) -> list[TaggedResource]:
        self._record("tagged", resource_type, value)
        return [
            TaggedResource(resource_id, resource_type)
            for resource_id in self.tags.get((resource_type, value), [])
        ]

    def assign_name(self, value: str, resource_id: str) -> None:
        self._record("assign_name", value, resource_id)

    def internet_gateways(self) -> list[InternetGateway]:
        self._record("internet_gateways")
        return self.gateways

    def subnet(self, network_id: str, cidr_block: str) -> Subnet | None:
        self._record("subnet", network_id, cidr_block)
        return self.subnets.get((network_id, cidr_block))

    def ingress_permitted(self, protocol: str, port: int, cidr: str, group_id: str) -> bool:
        self._record("ingress_permitted", protocol, port, cidr, group_id)
        return (protocol, port, cidr, group_id) in self.ingress

    def authorize_ingress(self, protocol: str, port: int, cidr: str, group_id: str) -> bool:
        self._record("authorize_ingress", protocol, port, cidr, group_id)
        self.ingress.add((protocol, port, cidr, group_id))
        return True

    def map_public_ip_on_launch(self, subnet_id: str) -> bool:
        self._record("map_public_ip_on_launch", subnet_id)
        return self.public_ips.get(subnet_id, False)

    def set_map_public_ip_on_launch(self, subnet_id: str, enabled: bool) -> bool:
        self._record("set_map_public_ip_on_launch", subnet_id, enabled)
        self.public_ips[subnet_id] = enabled
        return enabled

    def latest_base_image(self, release: str) -> str | None:
        self._record("latest_base_image", release)
        return self.image_id

    def import_key_pair(self, name: str, public_key: str) -> str:
        self._record("import_key_pair", name, public_key)
        key_pair_id = self._next("key")
        self.key_pairs[name] = key_pair_id
        return key_pair_id

    def key_pair(self, name: str) -> str | None:
        self._record("key_pair", name)
        return self.key_pairs.get(name)

    def caller_username(self) -> str | None:
        self._record("caller_username")
        return self.username


class MemoryCache:
    """``KeyCache`` over a plain dict, with read/write counters."""

    def __init__(self) -> None:
        self.entries: dict[tuple[str, str], str] = {}
        self.reads: int = 0
        self.writes: int = 0

    def get(self, namespace: str, key: str) -> str | None:
        self.reads += 1
        return self.entries.get((namespace, key))

    def put(self, namespace: str, key: str, value: str) -> str:
        self.writes += 1
        self.entries[(namespace, key)] = value
        return value


class FakeSshKey:
    def __init__(self, name: str) -> None:
        self.name = name
        self.path = Path("/keys") / name
        self.public_key = f"ssh-rsa AAAAfake {name}"


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def cache() -> MemoryCache:
    return MemoryCache()


@pytest.fixture
def config(tmp_path: Path) -> BootstrapConfig:
    return BootstrapConfig(cache_path=tmp_path / "cache")


@pytest.fixture
def environ() -> dict[str, str]:
    return {"BOOTSTRAP_TAG": TAG}


@pytest.fixture
def overrides(environ: dict[str, str]) -> EnvironmentOverrides:
    return EnvironmentOverrides(environ)
