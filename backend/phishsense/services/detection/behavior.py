"""
PhishSense Behavior Tracker

Scores the sender against its history in a caller-supplied trust store.
The tracker keeps no state between calls.

- No history: first contact. Moderate sub-score and a small positive
  adjustment ("no signal", not "bad signal").
- Phishing history: sub-score grows with the phishing share of all
  messages from the sender.
- Only-safe history or an explicit trust entry: trusted sender with a
  negative adjustment, capped by the combiner when a hard rule or
  authentication failure is present.
"""

from datetime import datetime
from typing import List, Optional

from ...config.scoring import BehaviorScoring, get_scoring_config
from ...models.detection import Finding, BehaviorDetails, Severity
from ...models.trust import BehaviorRecord, TrustedRecord
from ...utils.helpers import utc_now, ensure_utc
from ..stores.trust import TrustStore
from .base import Detector, DetectorResult, clamp_score


class BehaviorTracker(Detector):
    """Sender history and trust."""

    name = "behavior"
    details_model = BehaviorDetails

    def __init__(self, trust_store: Optional[TrustStore] = None, scoring: Optional[BehaviorScoring] = None):
        super().__init__()
        self.trust_store = trust_store
        self.scoring = scoring or get_scoring_config().behavior

    async def evaluate(
        self,
        sender: str,
        trust_store: Optional[TrustStore] = None,
        now: Optional[datetime] = None,
    ) -> DetectorResult:
        """
        Score a sender from its history.

        Args:
            sender: Raw From value
            trust_store: Store for this call; falls back to the one given at construction
            now: Reference time for dormancy (the email's analyzed_at)

        Returns:
            DetectorResult with BehaviorDetails and the trust adjustment in `bonus`
        """
        store = trust_store if trust_store is not None else self.trust_store
        if store is None:
            return self.degraded("no-trust-store")

        now = ensure_utc(now or utc_now())
        record = store.get_behavior_snapshot(sender)
        trusted_record = store.get_trusted_record(sender)
        if trusted_record is not None and trusted_record.confirmation_count < self.scoring.trusted_confirmation_threshold:
            self.logger.debug(
                f"Trust entry for {trusted_record.sender} has {trusted_record.confirmation_count} "
                f"confirmation(s), below {self.scoring.trusted_confirmation_threshold}"
            )
            trusted_record = None

        if record is None or record.total_emails == 0:
            return self._first_contact(record, trusted_record)
        return self._from_history(record, trusted_record, now)

    def _first_contact(self, record: Optional[BehaviorRecord], trusted_record: Optional[TrustedRecord]) -> DetectorResult:
        details = BehaviorDetails(
            is_first_interaction=True,
            first_seen=record.first_seen if record else None,
            last_seen=record.last_seen if record else None,
        )

        if trusted_record is not None:
            details.trusted_sender = True
            return DetectorResult(
                score=0.0,
                findings=[Finding(
                    text="Sender is on your trusted list",
                    severity=Severity.LOW,
                    category="trusted_sender",
                )],
                details=details,
                bonus=-min(self.scoring.trusted_record_bonus, self.scoring.bonus_cap),
            )

        return DetectorResult(
            score=clamp_score(self.scoring.first_contact_points),
            findings=[Finding(
                text="First message from this sender",
                severity=Severity.LOW,
                category="first_contact",
            )],
            details=details,
            bonus=self.scoring.first_contact_increment,
        )

    def _from_history(self, record: BehaviorRecord, trusted_record: Optional[TrustedRecord], now: datetime) -> DetectorResult:
        total = record.total_emails
        phishing = record.phishing_count
        suspicious = record.suspicious_count
        safe = record.safe_count

        findings: List[Finding] = []
        score = 0.0

        if phishing > 0:
            ratio = min(1.0, phishing / total)
            score += self.scoring.phishing_base_points + self.scoring.phishing_ratio_points * ratio
            findings.append(Finding(
                text=f"Sender has {phishing} prior phishing message(s) ({ratio:.0%} of history)",
                severity=Severity.HIGH,
                category="sender_history",
            ))

        if suspicious > 0:
            ratio = min(1.0, suspicious / total)
            score += self.scoring.suspicious_ratio_points * ratio
            findings.append(Finding(
                text=f"Sender has {suspicious} prior suspicious message(s)",
                severity=Severity.MEDIUM,
                category="sender_history",
            ))

        days_since = None
        if record.last_seen is not None:
            days_since = max(0, (now - ensure_utc(record.last_seen)).days)
            if days_since > self.scoring.dormant_days:
                score += self.scoring.dormant_points
                findings.append(Finding(
                    text=f"Sender has been inactive for {days_since} days",
                    severity=Severity.LOW,
                    category="sender_history",
                ))

        bonus = 0
        frequent_safe = suspicious == 0 and safe >= self.scoring.trusted_safe_threshold
        trusted = phishing == 0 and (trusted_record is not None or frequent_safe)
        if trusted:
            if trusted_record is not None:
                bonus -= self.scoring.trusted_record_bonus
            if frequent_safe:
                bonus -= self.scoring.frequent_safe_bonus
            bonus = max(bonus, -self.scoring.bonus_cap)
            findings.append(Finding(
                text=f"Trusted sender: {safe} prior safe message(s)",
                severity=Severity.LOW,
                category="trusted_sender",
            ))

        details = BehaviorDetails(
            total_interactions=total,
            phishing_interactions=phishing,
            safe_interactions=safe,
            suspicious_interactions=suspicious,
            days_since_last_interaction=days_since,
            is_first_interaction=False,
            first_seen=record.first_seen,
            last_seen=record.last_seen,
            trusted_sender=trusted,
        )

        self.logger.debug(f"Behavior for {record.sender}: score={score:.1f} bonus={bonus} trusted={trusted}")
        return DetectorResult(score=clamp_score(score), findings=findings, details=details, bonus=bonus)
