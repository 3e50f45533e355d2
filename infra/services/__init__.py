"""Core services package

Bao gồm các service chính:
- RunnerClient: Gọi remote execution service (Piston) để chạy code
"""
from .runner_client import RunnerClient

__all__ = [
    'RunnerClient',
]
