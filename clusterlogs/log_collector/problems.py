"""Root cause classification for captured log lines."""

import re
from dataclasses import dataclass
from typing import Iterable

# Known failure signatures. Joined into a single alternation.
ROOT_CAUSES = (
    r'^error: ',
    r'eviction manager: pods.* evicted',
    r'unknown flag: --',
    r'forbidden.*no providers available',
    r'eviction manager:.*evicted',
    r'tls: bad certificate',
    r'kubelet.*no API client',
    r'kubelet.*No api server',
    r'STDIN.*127.0.0.1:8080',
    r'failed to create listener',
    r'address already in use',
    r'unable to evict any pods',
    r'eviction manager: unexpected error',
    r'Resetting AnonymousAuth to false',
    r'Unable to register node.*forbidden',
    r'Failed to initialize CSINodeInfo.*forbidden',
    r'Failed to admit pod',
    r'failed to "StartContainer"',
    r'Failed to start ContainerManager',
    r'kubelet.*forbidden.*cannot \w+ resource',
    r'leases.*forbidden.*cannot \w+ resource',
    r'failed to start daemon',
)

# Spurious errors that are never surfaced, even when a root cause matches.
IGNORE_CAUSE = r'error: no objects passed to apply'


@dataclass(frozen=True)
class RuleSet:
    """Compiled failure matcher plus the suppression matcher that overrides it."""

    failure: re.Pattern
    ignore: re.Pattern

    @classmethod
    def from_patterns(cls, patterns: Iterable[str], ignore: str) -> "RuleSet":
        return cls(
            failure=re.compile("|".join(patterns)),
            ignore=re.compile(ignore),
        )

    def is_problem(self, line: str) -> bool:
        """Return whether this line matches a known problem."""
        return self.failure.search(line) is not None and self.ignore.search(line) is None


DEFAULT_RULES = RuleSet.from_patterns(ROOT_CAUSES, IGNORE_CAUSE)


def is_problem(line: str, rules: RuleSet = DEFAULT_RULES) -> bool:
    """Return whether this line matches a known problem."""
    return rules.is_problem(line)


def find_problem_lines(text: str, rules: RuleSet = DEFAULT_RULES) -> list[str]:
    """Scan captured text line by line, keeping matches in capture order."""
    lines = (line.removesuffix("\r") for line in text.split("\n"))
    return [line for line in lines if rules.is_problem(line)]
