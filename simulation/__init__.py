"""Day-stepped trading simulation: broker, audit log and the orchestration loop."""

from simulation.broker import Broker
from simulation.runner import SimulationRunner

__all__ = ["Broker", "SimulationRunner"]
