"""
Prune the timestamp-named branches left behind by object updates.

Branches named by a numeric timestamp (e.g. 1706153906529) are created for
every change to the repository objects. Only the newest max_branches of
them are kept; branches with other names (main, feature branches) are never
touched.
"""

from dataclasses import dataclass, field
from typing import Protocol

from ..core.exceptions import MediumroastError
from ..utils.logger import get_logger

logger = get_logger("mrreports.maintenance.branches")


class BranchStore(Protocol):
    def list_branches(self) -> list[dict]:
        ...

    def delete_branch(self, name: str) -> None:
        ...


@dataclass
class PruneResult:
    kept: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


def prune_branches(store: BranchStore, max_branches: int = 15) -> PruneResult:
    """
    Delete all but the newest max_branches timestamp branches.

    Args:
        store: Branch listing and deletion (GitHubStore).
        max_branches: Number of timestamp branches to keep.

    Returns:
        PruneResult with the kept, deleted and failed branch names.
    """
    if max_branches < 0:
        raise ValueError(f"max_branches must be >= 0, got {max_branches}")

    names = [branch["name"] for branch in store.list_branches()]
    timestamped = sorted((name for name in names if name.isdigit()), key=int, reverse=True)

    result = PruneResult(kept=timestamped[:max_branches])
    for name in timestamped[max_branches:]:
        try:
            store.delete_branch(name)
        except MediumroastError as e:
            logger.error(f"Failed to delete branch {name}: {e}")
            result.failed[name] = str(e)
        else:
            result.deleted.append(name)

    logger.info(
        f"Branch pruning kept {len(result.kept)}, deleted {len(result.deleted)}, "
        f"failed {len(result.failed)} (max {max_branches})"
    )
    return result
