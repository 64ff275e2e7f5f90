"""Observable run state contracts for the presentation layer."""

from taskforce.shared.contracts.run_snapshot import (
    ActivityMessage,
    RunSnapshot,
    SubTaskSnapshot,
)

__all__ = ["ActivityMessage", "RunSnapshot", "SubTaskSnapshot"]
