"""Tests for resource keys and run facts."""
from __future__ import annotations

from lkg_bootstrap.keys import ResourceKey, RunFact


def test_resource_key_values() -> None:
    assert [key.value for key in ResourceKey] == [
        "network",
        "internet-gateway",
        "public-subnet",
        "private-subnet",
        "security-group",
        "ssh-key-name",
        "instance",
    ]


def test_override_variables() -> None:
    assert ResourceKey.NETWORK.override_variable == "BOOTSTRAP_VPC_ID"
    assert ResourceKey.INTERNET_GATEWAY.override_variable == "BOOTSTRAP_INTERNET_GATEWAY_ID"
    assert ResourceKey.SECURITY_GROUP.override_variable == "BOOTSTRAP_JUMPBOX_SECURITY_GROUP"
    assert ResourceKey.PUBLIC_SUBNET.override_variable == "BOOTSTRAP_PUBLIC_SUBNET_ID"
    assert ResourceKey.PRIVATE_SUBNET.override_variable == "BOOTSTRAP_PRIVATE_SUBNET_ID"
    assert ResourceKey.INSTANCE.override_variable == "BOOTSTRAP_JUMPBOX_ID"
    assert ResourceKey.SSH_KEY.override_variable is None


def test_resource_types() -> None:
    assert ResourceKey.NETWORK.resource_type == "vpc"
    assert ResourceKey.SSH_KEY.resource_type == "key-pair"
    assert ResourceKey.PUBLIC_SUBNET.resource_type == ResourceKey.PRIVATE_SUBNET.resource_type


def test_run_fact_variables() -> None:
    assert RunFact.USERNAME.override_variable == "BOOTSTRAP_USERNAME"
    assert RunFact.UUID.override_variable == "BOOTSTRAP_UUID"
    assert RunFact.AMI.override_variable == "BOOTSTRAP_AMI"
