"""
Utilities Package
Operator-facing reporting
"""

from .deployment_reporter import DeploymentReporter, OutputSink, StreamSink, LoguruSink

__all__ = [
    'DeploymentReporter',
    'OutputSink',
    'StreamSink',
    'LoguruSink'
]
