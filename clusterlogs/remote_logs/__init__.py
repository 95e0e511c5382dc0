"""Remote command execution on cluster nodes over SSH.

Only read-only log commands are sent; anything that would modify containers
or the cluster is refused locally.
"""

from .ssh_runner import SSHRunner, UnsafeCommandError

__all__ = ["SSHRunner", "UnsafeCommandError"]
