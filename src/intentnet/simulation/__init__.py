"""Scene simulation, simulated users and batch evaluation."""

from .simulator import SceneSimulator, FIXED_SCENE
from .user import SimulatedUser
from .evaluation import EvaluationReport, run_session, run_evaluation

__all__ = [
    "SceneSimulator",
    "FIXED_SCENE",
    "SimulatedUser",
    "EvaluationReport",
    "run_session",
    "run_evaluation",
]
