"""Verify that component Protocol interfaces are importable and records behave."""
from __future__ import annotations

from lkg_bootstrap.agent import BootstrapOutputs
from lkg_bootstrap.components.gateway import InternetGateway, ProviderGateway, Subnet
from lkg_bootstrap.components.state import KeyCache, OverrideSource


def test_protocols_are_importable() -> None:
    assert ProviderGateway is not None
    assert KeyCache is not None
    assert OverrideSource is not None


def test_internet_gateway_attachment() -> None:
    gateway = InternetGateway("igw-1", ["vpc-1", "vpc-2"])
    assert gateway.attached_to("vpc-2")
    assert not gateway.attached_to("vpc-3")


def test_subnet_named_requires_exact_value() -> None:
    assert Subnet("subnet-1", tags={"Name": "lkg@alice/abc"}).named("lkg@alice/abc")
    assert not Subnet("subnet-1", tags={"Name": "other"}).named("lkg@alice/abc")
    assert not Subnet("subnet-1").named("lkg@alice/abc")


def test_bootstrap_outputs_as_dict() -> None:
    outputs = BootstrapOutputs(
        bootstrap_tag="lkg@alice/abc",
        vpc_id="vpc-1",
        internet_gateway_id="igw-1",
        public_subnet_id="subnet-pub",
        private_subnet_id="subnet-priv",
        security_group_id="sg-1",
        jumpbox_id="i-1",
        ssh_key_path="/keys/lkg@alice_abc",
    )
    assert outputs.as_dict()["vpc_id"] == "vpc-1"
    assert len(outputs.as_dict()) == 8
