"""
PhishSense Trust Store

Sender history and user-trusted senders. The behavior tracker reads a
store; it never writes to it. Lookups try the full address first and
then the sender's domain.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Optional

from ...models.trust import BehaviorRecord, TrustedRecord
from ...utils.exceptions import StoreError
from ...utils.helpers import extract_email_parts

logger = logging.getLogger(__name__)


def _lookup_keys(sender: str):
    """Candidate keys for a sender: address, then domain."""
    _, address, domain = extract_email_parts(sender or "")
    keys = []
    if address:
        keys.append(address)
    if domain:
        keys.append(domain)
    if not keys and sender and sender.strip():
        keys.append(sender.strip().lower())
    return keys


class TrustStore(ABC):
    """Read interface for sender history."""

    @abstractmethod
    def get_behavior_snapshot(self, sender: str) -> Optional[BehaviorRecord]:
        """History for the sender or its domain, if any."""
        pass

    @abstractmethod
    def get_trusted_record(self, sender: str) -> Optional[TrustedRecord]:
        """Trust entry for the sender or its domain, if any."""
        pass

    def is_sender_trusted(self, sender: str, min_confirmations: int = 1) -> bool:
        record = self.get_trusted_record(sender)
        return record is not None and record.confirmation_count >= min_confirmations


class TrustStoreSnapshot(TrustStore):
    """
    Immutable in-memory trust store.

    Built from record lists (for example a caller's synced history);
    later records for the same key replace earlier ones. A trusted record
    with a domain also answers for other addresses on that domain.
    """

    def __init__(
        self,
        behavior_records: Optional[Iterable[BehaviorRecord]] = None,
        trusted_records: Optional[Iterable[TrustedRecord]] = None,
    ):
        self._behavior: Dict[str, BehaviorRecord] = {}
        self._trusted: Dict[str, TrustedRecord] = {}

        for record in behavior_records or []:
            key = self._key(record.sender)
            self._behavior[key] = record
        trusted_count = 0
        for record in trusted_records or []:
            key = self._key(record.sender)
            self._trusted[key] = record
            trusted_count += 1
            # A record scoped to a domain trusts every address under it
            if record.domain and record.domain.strip():
                self._trusted.setdefault(record.domain.strip().lower(), record)
        self._trusted_count = trusted_count

        logger.debug(
            f"Trust store snapshot: {len(self._behavior)} behavior records, "
            f"{trusted_count} trusted senders"
        )

    @staticmethod
    def _key(sender: str) -> str:
        if not sender or not sender.strip():
            raise StoreError("Trust store record has an empty sender")
        keys = _lookup_keys(sender)
        return keys[0]

    def get_behavior_snapshot(self, sender: str) -> Optional[BehaviorRecord]:
        for key in _lookup_keys(sender):
            if key in self._behavior:
                return self._behavior[key]
        return None

    def get_trusted_record(self, sender: str) -> Optional[TrustedRecord]:
        for key in _lookup_keys(sender):
            if key in self._trusted:
                return self._trusted[key]
        return None

    def __len__(self) -> int:
        return len(self._behavior) + self._trusted_count
