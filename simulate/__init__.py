"""
Chain Simulation Module
Dispatch boundary between callers and the simulated chain modules.
"""

from .app import SimulateApp

__all__ = ['SimulateApp']
