"""
Deployment Reporter
Formats deployment outcomes for operator visibility
"""

import sys
from typing import List, Optional, TextIO, Union

import click
from loguru import logger

from deployer.exceptions import ConfigError, DeployerError
from deployer.models import DeploymentResult


BANNER = "=" * 50

Outcome = Union[DeploymentResult, DeployerError]


class OutputSink:
    """Line-oriented destination for report output"""

    def write(self, line: str):
        raise NotImplementedError


class StreamSink(OutputSink):
    """Writes lines to a text stream (stdout unless given)"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def write(self, line: str):
        click.echo(line, file=self.stream or sys.stdout)


class LoguruSink(OutputSink):
    """Routes lines through the application logger"""

    def __init__(self, level: str = "INFO"):
        self.level = level

    def write(self, line: str):
        logger.log(self.level, line)


class DeploymentReporter:
    """
    Turns a DeploymentResult or DeploymentError into report lines

    Formatting is pure. Writing never raises: a broken sink must not mask
    the deployment outcome, so failures surface only as a False return.
    """

    def format_outcome(self, outcome: Outcome) -> List[str]:
        """
        Lines describing an outcome

        Args:
            outcome: Successful result or deployer error

        Returns:
            Report lines
        """
        if isinstance(outcome, DeploymentResult):
            return self._format_result(outcome)
        return self._format_error(outcome)

    def report(self, outcome: Outcome, sink: OutputSink) -> bool:
        """
        Write the report for an outcome

        Args:
            outcome: Successful result or deployer error
            sink: Output destination

        Returns:
            True if every line was written
        """
        try:
            for line in self.format_outcome(outcome):
                sink.write(line)
            return True
        except Exception as e:
            logger.debug(f"Deployment report not delivered: {e}")
            return False

    def _format_result(self, result: DeploymentResult) -> List[str]:
        return [
            BANNER,
            "DEPLOYMENT SUMMARY",
            BANNER,
            f"Contract: {result.contract_name}",
            f"Address: {result.contract_address}",
            f"Network: {result.network}",
            f"Deployer: {result.deployer}",
            f"Transaction hash: {result.transaction_hash}",
            f"Block: {result.block_number}",
            f"Confirmations: {result.confirmed_block_count}",
            f"Gas used: {result.gas_used}",
            BANNER,
        ]

    def _format_error(self, error: BaseException) -> List[str]:
        kind = getattr(error, 'kind', type(error).__name__)
        heading = "Configuration error" if isinstance(error, ConfigError) else "Deployment failed"
        lines = [
            f"{heading}: {kind}",
            f"Reason: {error}",
        ]

        tx_hash = getattr(error, 'transaction_hash', None)
        if tx_hash:
            lines.append(f"Transaction hash: {tx_hash}")

        return lines
