"""
Controller - host-side plan and apply.

Drives the resource plugins the way an orchestration host does: refresh
every recorded entity, then create, update or delete so the remote side
matches the declared configuration. The controller owns no storage; the
caller passes the desired configuration and the state snapshot in and
persists the snapshot that comes back.

Both mappings are keyed by address, '<kind>.<name>' (e.g. 'bot.support').
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from config import ControllerConfig
from entities import get_kind
from errors import ReconcilerError
from provider import Provider

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class ChangeAction(Enum):
    """Action taken for one address."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "noop"


@dataclass
class PlannedChange:
    """A change the controller would make for one address."""

    address: str
    kind: str
    action: ChangeAction
    changed_fields: List[str] = field(default_factory=list)


@dataclass
class ReconcileResult:
    """Result of reconciling one address."""

    address: str
    action: ChangeAction = ChangeAction.NOOP
    success: bool = False
    message: str = ""
    drift_detected: bool = False
    duration_seconds: Optional[float] = None


@dataclass
class ApplyReport:
    """Outcome of an apply run: per-address results and the new state."""

    results: List[ReconcileResult] = field(default_factory=list)
    state: Dict[str, Record] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return all(result.success for result in self.results)

    @property
    def failed(self) -> List[ReconcileResult]:
        return [result for result in self.results if not result.success]


def parse_address(address: str) -> Tuple[str, str]:
    """
    Split an address into (kind, name).

    Raises:
        ValueError: If the address is malformed or names an unknown kind
    """
    kind, sep, name = address.partition(".")
    if not sep or not kind or not name:
        raise ValueError(f"Invalid address '{address}': expected '<kind>.<name>'")
    return get_kind(kind).name, name


def changed_fields(kind_name: str, declared: Record, recorded: Record) -> List[str]:
    """Mutable fields whose declared value differs from the recorded one."""
    kind = get_kind(kind_name)
    want = kind.normalize(declared)
    have = kind.normalize(recorded)
    return [name for name in want if want[name] != have[name]]


class Controller:
    """
    Plans and applies declared configuration through the resource plugins.

    Different addresses are reconciled concurrently, bounded by
    max_concurrent_reconciles; operations for one address run in order.
    """

    def __init__(self, provider: Provider, config: Optional[ControllerConfig] = None):
        self.provider = provider
        self.config = config or ControllerConfig()
        self.max_concurrent_reconciles = self.config.max_concurrent_reconciles

    def plan(
        self, desired: Dict[str, Record], state: Dict[str, Record]
    ) -> List[PlannedChange]:
        """
        Compute the changes needed, comparing against the recorded state
        without refreshing it.

        Args:
            desired: Declared configuration by address
            state: Recorded state snapshot by address

        Returns:
            The planned changes, in address order; unchanged addresses are
            omitted.
        """
        changes = []
        for address in sorted(set(desired) | set(state)):
            kind, _ = parse_address(address)
            if address not in state:
                changes.append(PlannedChange(address, kind, ChangeAction.CREATE))
            elif address not in desired:
                changes.append(PlannedChange(address, kind, ChangeAction.DELETE))
            else:
                diff = changed_fields(kind, desired[address], state[address])
                if diff:
                    changes.append(
                        PlannedChange(address, kind, ChangeAction.UPDATE, diff)
                    )
        return changes

    async def apply(
        self, desired: Dict[str, Record], state: Dict[str, Record]
    ) -> ApplyReport:
        """
        Reconcile every address and return the results and new state.

        A failed address keeps its previous state entry.
        """
        addresses = sorted(set(desired) | set(state))
        for address in addresses:
            parse_address(address)

        semaphore = asyncio.Semaphore(self.max_concurrent_reconciles)

        async def run(address: str) -> Tuple[ReconcileResult, Optional[Record]]:
            async with semaphore:
                return await self._reconcile_address(
                    address, desired.get(address), state.get(address)
                )

        outcomes = await asyncio.gather(*(run(address) for address in addresses))

        report = ApplyReport()
        for address, (result, record) in zip(addresses, outcomes):
            report.results.append(result)
            if record is not None:
                report.state[address] = record

        logger.info(
            f"Apply finished: {len(report.results) - len(report.failed)} succeeded, "
            f"{len(report.failed)} failed"
        )
        return report

    async def _reconcile_address(
        self,
        address: str,
        declared: Optional[Record],
        recorded: Optional[Record],
    ) -> Tuple[ReconcileResult, Optional[Record]]:
        """
        Reconcile a single address.

        Returns:
            The result and the record to keep for the address (None to
            drop it).
        """
        kind, _ = parse_address(address)
        resource = self.provider.resource(kind)
        result = ReconcileResult(address=address)
        start_time = time.monotonic()
        # Record as of the last operation that succeeded
        current = recorded

        try:
            if current is not None:
                current = await resource.read(current)
                if current is None:
                    result.drift_detected = True
                    logger.info(f"Drift detected for {address}: removed remotely")

            if declared is not None:
                if current is None:
                    result.action = ChangeAction.CREATE
                    current = await resource.create(declared)
                    result.message = f"{address} created"
                elif changed_fields(kind, declared, current):
                    result.action = ChangeAction.UPDATE
                    current = await resource.update(current, declared)
                    result.message = f"{address} updated"
                else:
                    result.message = f"{address} is up to date"
            elif current is not None:
                result.action = ChangeAction.DELETE
                await resource.delete(current)
                current = None
                result.message = f"{address} deleted"
            else:
                result.message = f"{address} already absent"

            result.success = True

        except (ReconcilerError, ValueError) as e:
            logger.error(f"Failed to reconcile {address}: {e}")
            result.success = False
            result.message = str(e)

        result.duration_seconds = time.monotonic() - start_time
        return result, current
