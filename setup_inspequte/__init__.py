"""
setup-inspequte: install the inspequte CLI inside CI runners.

Resolves a platform-specific inspequte release from GitHub, installs it
through a tool cache, and exposes it on PATH.
"""

from setup_inspequte.installer import InspequteInstaller, SetupOutcome, run

__all__ = ["InspequteInstaller", "SetupOutcome", "run"]
