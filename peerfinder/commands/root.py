import asyncio
import sys

import click
import uvloop
from pydantic import ValidationError

from peerfinder.discovery import (
    PeerFinder,
    PeerFinderConfig,
    PeerFinderError,
)
from peerfinder.discovery.logging_models import DiscoveryFatal
from peerfinder.env import Env, load_env
from peerfinder.logging import Logger, LoggingConfig


def build_config(
    env: Env,
    on_change: str,
    on_start: str,
    service: str,
    domain: str,
    extra_domains: str,
) -> PeerFinderConfig:
    return PeerFinderConfig(
        service=service,
        namespace=env.POD_NAMESPACE or "",
        domain=domain,
        extra_domains=extra_domains,
        on_start=on_start,
        on_change=on_change,
        resolv_conf_path=env.PEER_FINDER_RESOLV_CONF,
        poll_interval=env.poll_interval_seconds,
        dns_timeout=env.dns_timeout_seconds,
    )


async def run_peer_finder(config: PeerFinderConfig) -> int:
    logger = Logger()
    finder = PeerFinder(config, logger=logger)

    try:
        await finder.run()
        return 0

    except PeerFinderError as err:
        watcher = finder.watcher
        await logger.log(
            DiscoveryFatal(
                message=str(err),
                service=config.service,
                self_identity=watcher.self_identity if watcher else "",
            )
        )
        return 1

    finally:
        await logger.close()


@click.command(
    help="Find the peers of a governing service from its DNS SRV records and run a script whenever they change."
)
@click.option(
    "--on-change",
    default="",
    help="Script to run on change, must accept a new line separated list of peers via stdin.",
)
@click.option(
    "--on-start",
    default="",
    help="Script to run on start, must accept a new line separated list of peers via stdin.",
)
@click.option(
    "--service",
    default="",
    help="Governing service responsible for the DNS records of the domain this pod is in.",
)
@click.option(
    "--ns",
    "namespace",
    default="",
    help="The namespace this pod is running in. If unspecified, the POD_NAMESPACE env var is used.",
)
@click.option(
    "--domain",
    default="",
    help="The Cluster Domain which is used by the Cluster, if not set tries to determine it from the resolver configuration.",
)
@click.option(
    "--extdomain",
    "extra_domains",
    default="",
    help="Comma-separated list of additional domains to probe (multi cluster peer finding).",
)
@click.option("--resolv-conf", default=None, help="Resolver configuration to infer the cluster domain from.")
@click.option("--poll-interval", default=None, help="Time between lookups, e.g. 1s.")
@click.option("--dns-timeout", default=None, help="Timeout for a single SRV query, e.g. 5s.")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(
        ["trace", "debug", "info", "warn", "error", "critical", "fatal"],
        case_sensitive=False,
    ),
)
@click.option("--env-file", default=None, help="Path to a .env file to load settings from.")
def peer_finder(
    on_change: str,
    on_start: str,
    service: str,
    namespace: str,
    domain: str,
    extra_domains: str,
    resolv_conf: str | None,
    poll_interval: str | None,
    dns_timeout: str | None,
    log_level: str | None,
    env_file: str | None,
):
    try:
        env = load_env(
            env_file=env_file,
            override={
                "POD_NAMESPACE": namespace,
                "PEER_FINDER_RESOLV_CONF": resolv_conf,
                "PEER_FINDER_POLL_INTERVAL": poll_interval,
                "PEER_FINDER_DNS_TIMEOUT": dns_timeout,
                "PEER_FINDER_LOG_LEVEL": log_level.lower() if log_level else None,
            },
        )

        config = build_config(
            env,
            on_change=on_change,
            on_start=on_start,
            service=service,
            domain=domain,
            extra_domains=extra_domains,
        )

    except (ValidationError, ValueError) as err:
        raise click.UsageError(str(err))

    LoggingConfig().update(
        log_directory=env.PEER_FINDER_LOGS_DIRECTORY,
        log_level=env.PEER_FINDER_LOG_LEVEL,
        log_output=env.PEER_FINDER_LOG_OUTPUT,
    )

    exit_code = 0

    try:
        exit_code = uvloop.run(run_peer_finder(config))

    except (
        KeyboardInterrupt,
        asyncio.CancelledError,
    ):
        pass

    sys.exit(exit_code)


def run():
    peer_finder(prog_name="peer-finder")
