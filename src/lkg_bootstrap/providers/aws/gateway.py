"""AWS EC2 implementation of ProviderGateway."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

from lkg_bootstrap.components.gateway import InstanceSpec, InternetGateway, Subnet, TaggedResource

logger: logging.Logger = logging.getLogger(__name__)

CANONICAL_OWNER_ID: str = "099720109477"


def _tags(resource: dict[str, Any]) -> dict[str, str]:
    return {tag["Key"]: tag["Value"] for tag in resource.get("Tags", [])}


def _subnet(resource: dict[str, Any]) -> Subnet:
    return Subnet(
        subnet_id=resource["SubnetId"],
        tags=_tags(resource),
        map_public_ip_on_launch=resource.get("MapPublicIpOnLaunch", False),
    )


def _username_from_arn(arn: str) -> str | None:
    """Extract a user name from a caller identity ARN.

    ``arn:aws:iam::123:user/path/alice`` yields ``alice``;
    ``arn:aws:sts::123:assumed-role/Role/alice`` yields the session name;
    the account root yields ``None``.
    """
    resource = arn.split(":", 5)[-1]
    kind, _, rest = resource.partition("/")
    if kind in ("user", "assumed-role", "federated-user") and rest:
        return rest.rsplit("/", 1)[-1]
    return None


class AwsGateway:
    """EC2 and STS backed ``ProviderGateway``.

    Every call is a single blocking request; errors from botocore are not
    caught except where a "not found" answer is the expected result.
    """

    def __init__(
        self,
        region: str | None = None,
        ec2: Any = None,
        sts: Any = None,
    ) -> None:
        self._ec2: Any = ec2 if ec2 is not None else boto3.client("ec2", region_name=region)
        self._sts: Any = sts if sts is not None else boto3.client("sts", region_name=region)

    def create_network(self, cidr_block: str) -> str:
        vpc_id: str = self._ec2.create_vpc(CidrBlock=cidr_block)["Vpc"]["VpcId"]
        logger.debug("vpc_created", extra={"vpc_id": vpc_id, "cidr_block": cidr_block})
        return vpc_id

    def create_internet_gateway(self) -> str:
        response = self._ec2.create_internet_gateway()
        return response["InternetGateway"]["InternetGatewayId"]

    def attach_internet_gateway(self, gateway_id: str, network_id: str) -> None:
        self._ec2.attach_internet_gateway(InternetGatewayId=gateway_id, VpcId=network_id)

    def create_subnet(self, network_id: str, cidr_block: str) -> Subnet:
        response = self._ec2.create_subnet(VpcId=network_id, CidrBlock=cidr_block)
        return _subnet(response["Subnet"])

    def create_security_group(self, name: str, network_id: str) -> str:
        response = self._ec2.create_security_group(
            GroupName=name,
            Description=f"{name} security group",
            VpcId=network_id,
        )
        return response["GroupId"]

    def create_instance(self, spec: InstanceSpec) -> str:
        response = self._ec2.run_instances(
            ImageId=spec.image_id,
            InstanceType=spec.instance_type,
            KeyName=spec.key_name,
            ClientToken=spec.client_token,
            MinCount=1,
            MaxCount=1,
            NetworkInterfaces=[
                {
                    "DeviceIndex": 0,
                    "SubnetId": spec.subnet_id,
                    "AssociatePublicIpAddress": True,
                    "Groups": spec.security_group_ids,
                }
            ],
        )
        return response["Instances"][0]["InstanceId"]

    def tagged(self, resource_type: str, value: str) -> list[TaggedResource]:
        """Return resources of ``resource_type`` carrying a tag whose value is ``value``.

        Results keep the order the provider returns them in.
        """
        paginator = self._ec2.get_paginator("describe_tags")
        found: list[TaggedResource] = []
        for page in paginator.paginate(
            Filters=[
                {"Name": "resource-type", "Values": [resource_type]},
                {"Name": "value", "Values": [value]},
            ]
        ):
            for tag in page.get("Tags", []):
                found.append(TaggedResource(tag["ResourceId"], tag["ResourceType"]))
        return found

    def assign_name(self, value: str, resource_id: str) -> None:
        self._ec2.create_tags(Resources=[resource_id], Tags=[{"Key": "Name", "Value": value}])
        logger.debug("name_assigned", extra={"resource_id": resource_id, "name": value})

    def internet_gateways(self) -> list[InternetGateway]:
        paginator = self._ec2.get_paginator("describe_internet_gateways")
        gateways: list[InternetGateway] = []
        for page in paginator.paginate():
            for gateway in page.get("InternetGateways", []):
                gateways.append(
                    InternetGateway(
                        gateway_id=gateway["InternetGatewayId"],
                        attachments=[
                            attachment["VpcId"] for attachment in gateway.get("Attachments", [])
                        ],
                    )
                )
        return gateways

    def subnet(self, network_id: str, cidr_block: str) -> Subnet | None:
        response = self._ec2.describe_subnets(
            Filters=[
                {"Name": "vpc-id", "Values": [network_id]},
                {"Name": "cidr-block", "Values": [cidr_block]},
            ]
        )
        subnets = response.get("Subnets", [])
        return _subnet(subnets[0]) if subnets else None

    def ingress_permitted(self, protocol: str, port: int, cidr: str, group_id: str) -> bool:
        response = self._ec2.describe_security_groups(GroupIds=[group_id])
        for group in response.get("SecurityGroups", []):
            for permission in group.get("IpPermissions", []):
                if (
                    permission.get("IpProtocol") == protocol
                    and permission.get("FromPort") == port
                    and permission.get("ToPort") == port
                    and any(r.get("CidrIp") == cidr for r in permission.get("IpRanges", []))
                ):
                    return True
        return False

    def authorize_ingress(self, protocol: str, port: int, cidr: str, group_id: str) -> bool:
        response = self._ec2.authorize_security_group_ingress(
            GroupId=group_id,
            IpPermissions=[
                {
                    "IpProtocol": protocol,
                    "FromPort": port,
                    "ToPort": port,
                    "IpRanges": [{"CidrIp": cidr}],
                }
            ],
        )
        return bool(response.get("Return", True))

    def map_public_ip_on_launch(self, subnet_id: str) -> bool:
        response = self._ec2.describe_subnets(SubnetIds=[subnet_id])
        return bool(response["Subnets"][0].get("MapPublicIpOnLaunch", False))

    def set_map_public_ip_on_launch(self, subnet_id: str, enabled: bool) -> bool:
        self._ec2.modify_subnet_attribute(
            SubnetId=subnet_id, MapPublicIpOnLaunch={"Value": enabled}
        )
        return enabled

    def latest_base_image(self, release: str) -> str | None:
        """Return the newest Canonical amd64 server image for an Ubuntu release."""
        response = self._ec2.describe_images(
            Owners=[CANONICAL_OWNER_ID],
            Filters=[
                {"Name": "name", "Values": [f"ubuntu/images/*/ubuntu-{release}-*-amd64-server-*"]},
                {"Name": "state", "Values": ["available"]},
            ],
        )
        images = sorted(
            response.get("Images", []), key=lambda image: image["CreationDate"], reverse=True
        )
        return images[0]["ImageId"] if images else None

    def import_key_pair(self, name: str, public_key: str) -> str:
        response = self._ec2.import_key_pair(
            KeyName=name, PublicKeyMaterial=public_key.encode("ascii")
        )
        return response["KeyPairId"]

    def key_pair(self, name: str) -> str | None:
        try:
            response = self._ec2.describe_key_pairs(KeyNames=[name])
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") == "InvalidKeyPair.NotFound":
                return None
            raise
        pairs = response.get("KeyPairs", [])
        return pairs[0]["KeyPairId"] if pairs else None

    def caller_username(self) -> str | None:
        arn: str = self._sts.get_caller_identity()["Arn"]
        return _username_from_arn(arn)
