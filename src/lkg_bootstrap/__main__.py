"""Command-line entry point: bootstrap the jumpbox and print its outputs."""

from __future__ import annotations

import json
import logging

import structlog

from lkg_bootstrap.agent import BootstrapAgent
from lkg_bootstrap.cache import DiskKeyCache
from lkg_bootstrap.config import BootstrapConfig
from lkg_bootstrap.overrides import EnvironmentOverrides
from lkg_bootstrap.providers.aws.gateway import AwsGateway

logger: logging.Logger = logging.getLogger(__name__)


def run(config: BootstrapConfig) -> dict[str, str]:
    """Resolve every bootstrap resource and return the resulting identifiers."""
    with DiskKeyCache(config.cache_path) as cache:
        agent = BootstrapAgent(
            config=config,
            gateway=AwsGateway(region=config.region),
            cache=cache,
            overrides=EnvironmentOverrides(),
        )
        logger.info("bootstrap_started", extra={"bootstrap_tag": agent.bootstrap_tag()})
        agent.jumpbox()
        agent.allow_ssh()
        agent.enable_public_ips()
        outputs = agent.outputs().as_dict()
    logger.info("bootstrap_finished", extra=outputs)
    return outputs


def main() -> None:
    config = BootstrapConfig.load()
    level = logging.getLevelNamesMapping()[config.log_level]
    logging.basicConfig(level=level)
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))
    print(json.dumps(run(config), indent=2))


if __name__ == "__main__":
    main()
