"""
Topology package exports.

Blocking-chain reconstruction used to turn flat wait-for session lists into
root-blocker trees.
"""

from engine.topology.graph import BlockingForest, build_forest

__all__ = ["BlockingForest", "build_forest"]
