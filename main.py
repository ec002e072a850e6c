"""
Contract Deployer - Main Entry Point
Deploys a compiled contract to a configured network profile
"""

import asyncio
import signal
import sys

import click
from loguru import logger

from blockchain.artifact_store import DEFAULT_ARTIFACTS_DIR, JsonArtifactStore
from blockchain.provider import derive_deployer_address
from deployer.config_resolver import (
    MNEMONIC_VAR,
    ConfigResolver,
    DeploymentCredentials,
    load_environment,
)
from deployer.deployment_executor import DeploymentExecutor
from deployer.exceptions import ConfigError, DeployerError, DeploymentError, MissingCredential
from deployer.models import DeploymentRequest, DeploymentResult
from utils.deployment_reporter import DeploymentReporter, LoguruSink, StreamSink


DEFAULT_CONTRACT = "DataToZeroAddress"

EXIT_CANCELLED = 130


def configure_logging(verbose: bool = False, log_file: str = None):
    """Configure loguru sinks for the CLI"""
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
        level="DEBUG" if verbose else "INFO"
    )
    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
            level="DEBUG"
        )


async def run_deployment(executor: DeploymentExecutor, request: DeploymentRequest) -> DeploymentResult:
    """
    Run one deployment, cancelling it on SIGTERM

    Args:
        executor: Deployment executor
        request: Deployment request

    Returns:
        DeploymentResult
    """
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()

    try:
        loop.add_signal_handler(signal.SIGTERM, task.cancel)
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        # No signal handlers outside the main thread or on Windows
        logger.debug("SIGTERM handler not installed")
        handler_installed = False

    try:
        return await executor.deploy(request)
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGTERM)


def _derive_deployer(credentials: DeploymentCredentials) -> str:
    try:
        return derive_deployer_address(credentials.mnemonic)
    except Exception as e:
        raise MissingCredential(
            MNEMONIC_VAR,
            f"MNEMONIC is not a valid BIP-39 mnemonic phrase ({e})"
        ) from e


def _non_empty(ctx, param, value):
    if not value or not value.strip():
        raise click.BadParameter("must be a non-empty contract name")
    return value.strip()


def _fail(reporter: DeploymentReporter, error: DeployerError):
    """Report an error on stderr and exit non-zero"""
    if not reporter.report(error, StreamSink(sys.stderr)):
        click.echo(f"{error.kind}: {error}", err=True)
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.option(
    "--log-file",
    help="Also write debug logs to this file (rotated daily).",
    type=click.Path(dir_okay=False),
    default=None,
)
def cli(verbose, log_file):
    """Smart contract deployment orchestrator."""
    configure_logging(verbose, log_file)


@cli.command()
@click.option(
    "--network",
    "-n",
    help="Network profile name, e.g. sepolia, monad_testnet, development.",
    required=True,
)
@click.option(
    "--contract",
    "-c",
    help="Name of the compiled contract to deploy.",
    default=DEFAULT_CONTRACT,
    show_default=True,
    callback=_non_empty,
)
@click.option(
    "--artifacts-dir",
    help="Directory with compiled contract artifacts.",
    type=click.Path(file_okay=False),
    default=DEFAULT_ARTIFACTS_DIR,
    show_default=True,
)
@click.option(
    "--env-file",
    help="dotenv file with MNEMONIC, PROJECT_ID and gas overrides.",
    type=click.Path(dir_okay=False),
    default=".env",
    show_default=True,
)
def deploy(network, contract, artifacts_dir, env_file):
    """Deploy a contract to NETWORK and wait for confirmations."""
    reporter = DeploymentReporter()
    raw_env = load_environment(env_file)

    try:
        profile = ConfigResolver().resolve(raw_env, network)
        credentials = DeploymentCredentials.from_env(raw_env)
        deployer = _derive_deployer(credentials)
    except ConfigError as e:
        _fail(reporter, e)

    logger.info("=" * 50)
    logger.info(f"Deploying to network: {profile.name}")
    logger.info(f"Deploying from account: {deployer}")
    logger.info("=" * 50)

    request = DeploymentRequest(
        contract_name=contract,
        deployer_account=deployer,
        profile=profile,
    )
    executor = DeploymentExecutor(credentials, JsonArtifactStore(artifacts_dir))

    try:
        result = asyncio.run(run_deployment(executor, request))
    except DeploymentError as e:
        _fail(reporter, e)
    except (KeyboardInterrupt, asyncio.CancelledError):
        click.echo("Deployment cancelled; transaction state unknown", err=True)
        sys.exit(EXIT_CANCELLED)

    if not reporter.report(result, StreamSink()):
        logger.warning("Deployment succeeded but the summary could not be written to stdout")
        reporter.report(result, LoguruSink("SUCCESS"))


if __name__ == "__main__":
    cli()
