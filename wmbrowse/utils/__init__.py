"""
Utilities — Cross-cutting concerns
"""

from .logger import setup_logging, shutdown_logging

__all__ = ['setup_logging', 'shutdown_logging']
