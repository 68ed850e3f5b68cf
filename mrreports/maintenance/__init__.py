"""Repository housekeeping."""

from .branches import PruneResult, prune_branches

__all__ = ["PruneResult", "prune_branches"]
