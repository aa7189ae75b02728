"""
BlogChecker API Module
======================

Request-triggered entry point.
"""

from .handler import handler

__all__ = ['handler']
