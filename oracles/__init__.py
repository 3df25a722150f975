"""Generative pipeline steps behind swappable interfaces.

Backends self-register with ``oracles.registry``; ``create_oracles`` builds
the ``OracleSuite`` named by ``OracleConfig.backend``.
"""

from oracles.base import (
    EvidenceSynthesizer,
    OracleSuite,
    QueryPlanner,
    ResearchReporter,
    SignalGenerator,
)
from oracles.policy import apply_confidence_banding
from oracles.registry import create_oracles

__all__ = [
    "EvidenceSynthesizer",
    "OracleSuite",
    "QueryPlanner",
    "ResearchReporter",
    "SignalGenerator",
    "apply_confidence_banding",
    "create_oracles",
]
