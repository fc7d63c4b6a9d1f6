"""
Resource Plugin Base - Reconciler contract for managed resources.

A resource plugin maps a declared configuration record onto one remote
entity through create, read, update, delete and import. Records are plain
dicts keyed by entity field names; a missing key or None means unset.

State transitions, from the host's point of view:

    Unmanaged --create/import--> Present --delete--> Unmanaged
    Present --read (remote entity gone)--> Unmanaged

Any failure leaves the host's recorded state untouched: the error is
raised and nothing is returned.
"""

import logging
from typing import Any, Dict, Optional

from errors import DecodeError, NotFoundError, ReconcilerError
from plugins.base import KindPlugin

logger = logging.getLogger(__name__)


class ResourcePlugin(KindPlugin):
    """
    Generic reconciler for one entity kind.

    Resource plugins are discovered via Python entry points in the
    'chatbotkit.resources' group, in addition to the built-in ones.
    """

    async def create(self, plan: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create the remote entity for a declared record.

        Args:
            plan: Declared configuration, without identifier.

        Returns:
            The declared record plus id, created_at and updated_at.

        Raises:
            DecodeError: If the response carries no identifier
        """
        draft = self.kind.entity_from_record(plan)
        try:
            created = await self.client.create(draft)
        except ReconcilerError as e:
            raise e.with_context("create", self.name)
        if not created.id:
            raise DecodeError("create response carried no identifier").with_context(
                "create", self.name
            )

        state = dict(plan)
        state["id"] = created.id
        state["created_at"] = created.created_at
        state["updated_at"] = created.updated_at

        logger.info(f"Created {self.name} {created.id}")
        return state

    async def read(self, state: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Refresh a recorded entity from the API.

        Every tracked field is overwritten with the server's value, except
        the identifier, an already recorded creation timestamp, and
        sensitive fields (the server never returns them).

        Args:
            state: The recorded state; must carry an identifier.

        Returns:
            The refreshed record, or None if the entity no longer exists
            remotely and the host should drop it.
        """
        identifier = self._identifier(state)
        try:
            entity = await self.client.get(identifier)
        except NotFoundError:
            logger.warning(
                f"Drift detected: {self.name} {identifier} no longer exists, "
                f"removing it from state"
            )
            return None
        except ReconcilerError as e:
            raise e.with_context("read", self.name, identifier)

        remote = self.kind.record_from_entity(entity)
        refreshed = dict(state)
        for name, value in remote.items():
            if name == "id" or name in self.kind.sensitive_fields:
                continue
            if name == "created_at" and state.get("created_at"):
                continue
            refreshed[name] = value
        return refreshed

    async def update(
        self, state: Dict[str, Any], plan: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Overwrite the remote entity with the full declared shape.

        Every mutable field is sent; fields unset in the plan are reset to
        their empty value remotely.

        Args:
            state: The recorded state holding the identifier.
            plan: The new declared configuration.

        Returns:
            The declared record with identifier, creation timestamp and the
            refreshed update timestamp.
        """
        identifier = self._identifier(state)
        draft = self.kind.entity_from_record(plan)
        try:
            updated = await self.client.update(identifier, draft)
        except ReconcilerError as e:
            raise e.with_context("update", self.name, identifier)

        new_state = dict(plan)
        new_state["id"] = identifier
        new_state["created_at"] = state.get("created_at") or updated.created_at
        new_state["updated_at"] = updated.updated_at

        logger.info(f"Updated {self.name} {identifier}")
        return new_state

    async def delete(self, state: Dict[str, Any]) -> None:
        """
        Delete the remote entity.

        A failure, including not-found, is raised; the host keeps the
        record and decides whether to retry.
        """
        identifier = self._identifier(state)
        try:
            await self.client.delete(identifier)
        except ReconcilerError as e:
            raise e.with_context("delete", self.name, identifier)

        logger.info(f"Deleted {self.name} {identifier}")

    def import_state(self, identifier: str) -> Dict[str, Any]:
        """
        Seed a record for an entity that already exists remotely.

        Only the identifier is known; the next read fills in the rest.
        """
        if not identifier:
            raise ValueError(f"Cannot import {self.name}: identifier is empty")
        return {"id": identifier}
