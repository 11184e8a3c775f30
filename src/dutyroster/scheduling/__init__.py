"""Roster generation engine."""

from dutyroster.scheduling.roster_generator import FAIRNESS_WINDOW_DAYS, RosterGenerator
from dutyroster.scheduling.workload import WorkloadCounter

__all__ = [
    "FAIRNESS_WINDOW_DAYS",
    "RosterGenerator",
    "WorkloadCounter",
]
