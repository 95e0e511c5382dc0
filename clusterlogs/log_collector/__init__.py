"""Log collection for cluster components and their containers."""

from .aggregator import FollowError, FollowGroup, find_problems, follow, output
from .commands import enabled_addon_pods, log_commands
from .problems import DEFAULT_RULES, RuleSet, is_problem

__all__ = [
    "FollowError",
    "FollowGroup",
    "follow",
    "find_problems",
    "output",
    "log_commands",
    "enabled_addon_pods",
    "RuleSet",
    "DEFAULT_RULES",
    "is_problem",
]
