"""
Execution result interpretation — pure functions, no I/O.

Turns an ExecutionResult into typed views:

    - ``execution_status()`` — Success | Failure(message)
    - ``gas_used()`` — GasCostSummary
    - ``object_changes()`` — list of ObjectChange
    - ``published_objects()`` — package id + created objects grouped by type

Two kinds of problems are kept apart:

    - Response shape: the section needed for the view is absent
      (MissingEffects, MissingObjectChanges, MissingPackageId). Usually
      a caller configuration issue, e.g. object changes not requested.
    - Chain outcome: the transaction executed and failed. That's a
      ``Failure`` value, not an exception.

``published_objects`` is ``object_changes`` followed by the pure
``partition_object_changes``, so each step can be tested on its own.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from sui_settle.errors import (
    MissingEffects,
    MissingObjectChanges,
    MissingPackageId,
    TransactionFailed,
)
from sui_settle.type_tag import StructTag
from sui_settle.types import (
    CreatedChange,
    ExecutionResult,
    ExecutionStatus,
    Failure,
    GasCostSummary,
    ObjectChange,
    PublishedChange,
    TransactionEffects,
)


@dataclass(frozen=True)
class CreatedObject:
    """An object created by a transaction."""

    object_id: str
    object_type: StructTag


@dataclass(frozen=True)
class PartitionedChanges:
    """Object changes split into the last Published record and created objects.

    Attributes:
        package_id: Package id of the last Published record scanned, or None.
        created_by_type: ``module::Name`` → created objects, in scan order.
    """

    package_id: str | None
    created_by_type: dict[str, list[CreatedObject]] = field(default_factory=dict)


@dataclass(frozen=True)
class PublishedObjects:
    """Package id and created objects of a publish transaction."""

    package_id: str
    created_by_type: dict[str, list[CreatedObject]]

    def objects_of(self, key: str) -> list[CreatedObject]:
        """Created objects for ``module::Name`` (empty if none)."""
        return self.created_by_type.get(key, [])


@dataclass(frozen=True)
class PublishedResponse:
    """A publish transaction's package id, raw changes and chain outcome."""

    package_id: str
    object_changes: tuple[ObjectChange, ...]
    execution_status: ExecutionStatus
    digest: str


# =========================================================================
# Section accessors
# =========================================================================


def effects(result: ExecutionResult) -> TransactionEffects:
    """The effects section.

    Raises:
        MissingEffects: If the result carries no effects section.
    """
    if result.effects is None:
        raise MissingEffects(
            f"No transaction effects in response {result.digest}",
            details={"digest": result.digest},
        )
    return result.effects


def execution_status(result: ExecutionResult) -> ExecutionStatus:
    """Ledger-reported outcome. A chain Failure is returned, not raised."""
    return effects(result).status


def gas_used(result: ExecutionResult) -> GasCostSummary:
    """Gas charged for the transaction."""
    return effects(result).gas_used


def object_changes(result: ExecutionResult) -> list[ObjectChange]:
    """Object changes reported for the transaction.

    Raises:
        MissingObjectChanges: If object changes were not populated. This
            happens when the caller didn't request them.
    """
    if result.object_changes is None:
        raise MissingObjectChanges(
            f"No object changes in transaction {result.digest} "
            "(were object changes requested?)",
            details={"digest": result.digest},
        )
    return list(result.object_changes)


# =========================================================================
# Published package view
# =========================================================================


def partition_object_changes(changes: Iterable[ObjectChange]) -> PartitionedChanges:
    """Single scan: last Published wins, Created grouped by ``module::Name``."""
    package_id: str | None = None
    created_by_type: dict[str, list[CreatedObject]] = {}
    for change in changes:
        if isinstance(change, PublishedChange):
            package_id = change.package_id
        elif isinstance(change, CreatedChange):
            created = CreatedObject(object_id=change.object_id, object_type=change.object_type)
            created_by_type.setdefault(change.object_type.key, []).append(created)
    return PartitionedChanges(package_id=package_id, created_by_type=created_by_type)


def published_objects(result: ExecutionResult) -> PublishedObjects:
    """Package id and created objects of a publish transaction.

    Raises:
        MissingObjectChanges: If object changes were not populated.
        MissingPackageId: If no Published record is present.
    """
    partitioned = partition_object_changes(object_changes(result))
    if partitioned.package_id is None:
        raise MissingPackageId(
            f"Missing package id in tx response {result.digest}",
            details={"digest": result.digest},
        )
    return PublishedObjects(
        package_id=partitioned.package_id,
        created_by_type=partitioned.created_by_type,
    )


def published_response(result: ExecutionResult) -> PublishedResponse:
    """Package id, object changes and execution status in one view.

    Raises:
        MissingObjectChanges, MissingPackageId, MissingEffects
    """
    changes = object_changes(result)
    package_id = partition_object_changes(changes).package_id
    if package_id is None:
        raise MissingPackageId(
            f"Missing package id in tx response {result.digest}",
            details={"digest": result.digest},
        )
    return PublishedResponse(
        package_id=package_id,
        object_changes=tuple(changes),
        execution_status=execution_status(result),
        digest=result.digest,
    )


def ensure_transaction_success(result: ExecutionResult) -> None:
    """Raise if the chain reported a Failure status.

    Raises:
        MissingEffects: If there's no effects section.
        TransactionFailed: If the status is Failure.
    """
    status = execution_status(result)
    if isinstance(status, Failure):
        raise TransactionFailed(
            f"Transaction failed with status:\n{status.message}",
            details={"digest": result.digest, "error": status.message},
        )
