from __future__ import annotations

import logging
import os
import threading

from ..errors import ContentNotFound, CounterOverflow, InvalidContent, NotAdmin, NotOwner
from ..records import (
    MAX_CONTENT_ID,
    ContentId,
    ContentRecord,
    Principal,
    RegistryState,
    as_content_id,
    as_fingerprint,
)
from ..validation import ValidationGate, select_gate

logger = logging.getLogger(__name__)

DEFAULT_VALIDATION_RULE = ""


class ContentRegistry:
    """Content-ownership registry.

    Maps content ids to (fingerprint, owner) records, keeps one id per distinct
    fingerprint and gates new registrations through an admin-controlled rule.

    Notes:
    - Every public method holds a single lock, so calls are applied one at a
      time even when served from a threaded server.
    - Mutations run all of their checks before touching state. A raised
      `RegistryError` always leaves the registry exactly as it was.
    """

    def __init__(
        self,
        admin: Principal,
        initial_rule: str | None = None,
        *,
        gated: bool = True,
        gate: ValidationGate | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._gate = select_gate(gated=gated, gate=gate)
        self._state = RegistryState(
            admin=admin,
            validation_rule=DEFAULT_VALIDATION_RULE if initial_rule is None else str(initial_rule),
        )
        self._revision = 0

    @classmethod
    def from_state(
        cls,
        state: RegistryState,
        *,
        gated: bool = True,
        gate: ValidationGate | None = None,
    ) -> "ContentRegistry":
        """Rebuild a registry from previously persisted state."""

        state.check_consistency()
        reg = cls(state.admin, state.validation_rule, gated=gated, gate=gate)
        reg._state = state.copy()
        return reg

    def snapshot(self) -> RegistryState:
        with self._lock:
            return self._state.copy()

    @property
    def admin(self) -> Principal:
        return self._state.admin

    def revision(self) -> int:
        with self._lock:
            return self._revision

    def count(self) -> int:
        with self._lock:
            return len(self._state.records)

    def next_id(self) -> ContentId:
        with self._lock:
            return self._state.next_id

    def get_validation_rule(self) -> str:
        with self._lock:
            return self._state.validation_rule

    def update_validation_rule(self, caller: Principal, new_rule: str) -> None:
        with self._lock:
            if caller != self._state.admin:
                logger.debug("Rejected validation rule update from non-admin %r", caller)
                raise NotAdmin()
            self._state.validation_rule = str(new_rule)
            self._revision += 1
            logger.info("Validation rule updated to %r", self._state.validation_rule)

    def register(self, caller: Principal, fingerprint: bytes | str) -> ContentId:
        """Register content and return its id.

        Re-registering a known fingerprint returns the existing id and leaves
        its owner untouched.
        """

        fp = as_fingerprint(fingerprint)
        with self._lock:
            state = self._state
            if not self._gate(fp, state.validation_rule):
                logger.debug("Fingerprint %r rejected by rule %r", fp, state.validation_rule)
                raise InvalidContent()

            existing = state.fingerprint_index.get(fp)
            if existing is not None:
                logger.debug("Fingerprint %r already registered as %d", fp, existing)
                return existing

            content_id = state.next_id
            if content_id >= MAX_CONTENT_ID:
                raise CounterOverflow()

            state.records[content_id] = ContentRecord(fingerprint=fp, owner=caller)
            state.fingerprint_index[fp] = content_id
            state.next_id = content_id + 1
            self._revision += 1
            logger.info("Registered content %d for %r", content_id, caller)
            return content_id

    def transfer_ownership(self, caller: Principal, content_id: ContentId, new_owner: Principal) -> None:
        cid = as_content_id(content_id)
        with self._lock:
            record = self._state.records.get(cid)
            if record is None:
                raise ContentNotFound()
            if caller != record.owner:
                logger.debug("Rejected transfer of %d by non-owner %r", content_id, caller)
                raise NotOwner()
            self._state.records[cid] = ContentRecord(fingerprint=record.fingerprint, owner=new_owner)
            self._revision += 1
            logger.info("Transferred content %d from %r to %r", content_id, caller, new_owner)

    def get_content(self, content_id: ContentId) -> ContentRecord | None:
        with self._lock:
            return self._state.records.get(as_content_id(content_id))

    def find_by_fingerprint(self, fingerprint: bytes | str) -> ContentId | None:
        fp = as_fingerprint(fingerprint)
        with self._lock:
            return self._state.fingerprint_index.get(fp)


def registry_from_env(
    *,
    admin: Principal | None = None,
    rule: str | None = None,
    gated: bool | None = None,
) -> ContentRegistry:
    """Build the registry a server process owns.

    Explicit arguments win; otherwise CONTENTREG_ADMIN, CONTENTREG_RULE and
    CONTENTREG_GATED are read.
    """

    if admin is None:
        admin = os.getenv("CONTENTREG_ADMIN", "admin")
    if rule is None:
        rule = os.getenv("CONTENTREG_RULE")
    if gated is None:
        gated = os.getenv("CONTENTREG_GATED", "1") not in {"0", "false", "False"}
    return ContentRegistry(admin, rule, gated=gated)
