"""
Command-line interface for NeuroGuard
"""

from .main import main

__all__ = ['main']
