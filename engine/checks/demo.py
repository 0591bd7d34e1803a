"""
Labelled demo quality and security checks served when no check backend is configured.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, TypeVar

import numpy as np

from api.responses import QualityCheck, SecurityCheck
from config import settings
from engine.enums import CheckLocation, QualityCheckType, SecurityCheckType, Severity

MODELS = ("gpt-4-turbo", "gpt-4o", "claude-3-sonnet", "claude-3-haiku")
PROVIDERS = ("openai", "anthropic")

QUALITY_DETAILS: Dict[QualityCheckType, Sequence[str]] = {
    QualityCheckType.hallucination: (
        "Response contains factual claims not supported by context",
        "Model generated plausible but unverifiable information",
        "Response aligns well with provided context",
        "Minor embellishment detected in response",
    ),
    QualityCheckType.relevance: (
        "Response directly addresses the user query",
        "Response partially addresses the query with tangential information",
        "Response drifts from the original topic",
        "High semantic similarity between query and response",
    ),
    QualityCheckType.coherence: (
        "Response maintains logical flow throughout",
        "Some logical inconsistencies detected",
        "Response structure could be improved",
        "Clear and well-organized response",
    ),
    QualityCheckType.factual_accuracy: (
        "Claims verified against knowledge base",
        "Unable to verify some factual claims",
        "Potential factual errors detected",
        "All verifiable claims are accurate",
    ),
    QualityCheckType.toxicity: (
        "No toxic content detected",
        "Mild negative sentiment detected",
        "Potentially inappropriate content flagged",
        "Response maintains professional tone",
    ),
    QualityCheckType.bias: (
        "No significant bias detected",
        "Potential gender/demographic bias flagged",
        "Response shows balanced perspective",
        "Minor phrasing bias detected",
    ),
}

SECURITY_DETECTED: Dict[SecurityCheckType, Sequence[str]] = {
    SecurityCheckType.prompt_injection: (
        'Potential prompt injection pattern detected: "ignore previous instructions"',
        "Suspicious instruction override attempt identified",
        "Encoded instruction injection detected (base64)",
    ),
    SecurityCheckType.pii_detection: (
        "Email address detected in response",
        "Phone number pattern found in output",
        "Credit card number pattern identified",
    ),
    SecurityCheckType.jailbreak: (
        "Role-play bypass attempt identified",
        "System prompt extraction attempt",
    ),
    SecurityCheckType.data_leakage: (
        "System prompt content detected in output",
        "Internal configuration exposed",
    ),
    SecurityCheckType.harmful_content: (
        "Request for harmful instructions detected",
        "Self-harm content flagged",
    ),
    SecurityCheckType.credential_exposure: (
        "API key pattern detected",
        "Password exposed in conversation",
    ),
}

SECURITY_CLEAN: Dict[SecurityCheckType, Sequence[str]] = {
    SecurityCheckType.prompt_injection: ("No prompt injection patterns detected",),
    SecurityCheckType.pii_detection: ("No PII detected in content",),
    SecurityCheckType.jailbreak: ("No jailbreak attempts detected",),
    SecurityCheckType.data_leakage: ("No data leakage detected",),
    SecurityCheckType.harmful_content: ("No harmful content detected",),
    SecurityCheckType.credential_exposure: ("No credentials detected",),
}

REMEDIATIONS: Dict[SecurityCheckType, Sequence[str]] = {
    SecurityCheckType.prompt_injection: ("Input sanitization applied", "Request blocked and logged"),
    SecurityCheckType.pii_detection: ("PII automatically redacted", "Response filtered for sensitive data"),
    SecurityCheckType.jailbreak: ("Request blocked and flagged for review", "Safety guardrails enforced"),
    SecurityCheckType.data_leakage: ("Response filtered before delivery", "Sensitive data redacted"),
    SecurityCheckType.harmful_content: ("Request blocked with safety message", "Flagged for human review"),
    SecurityCheckType.credential_exposure: ("Credentials automatically masked", "Security alert generated"),
}

_T = TypeVar("_T")


def _pick(rng: np.random.Generator, options: Sequence[_T]) -> _T:
    return options[int(rng.integers(0, len(options)))]


def _iso(seconds: float) -> str:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()


def quality_severity(score: float, lower_is_better: bool) -> Severity:
    """Severity of a failed check from its distance past the pass threshold."""
    threshold = settings.quality_negative_threshold if lower_is_better else settings.quality_positive_threshold
    distance = score - threshold if lower_is_better else threshold - score
    if distance > 0.4:
        return Severity.critical
    if distance > 0.2:
        return Severity.high
    if distance > 0:
        return Severity.medium
    return Severity.low


def demo_quality_checks(count: Optional[int] = None, seed: Optional[int] = None, now: Optional[float] = None) -> List[QualityCheck]:
    count = settings.checks_demo_count if count is None else max(0, count)
    rng = np.random.default_rng(settings.demo_seed if seed is None else seed)
    now = time.time() if now is None else now
    stamp = int(now * 1000)
    types = list(QualityCheckType)

    checks: List[QualityCheck] = []
    for i in range(count):
        check_type = _pick(rng, types)
        lower = check_type.lower_is_better()
        score = float(rng.random())
        if lower:
            passed = score < settings.quality_negative_threshold
        else:
            passed = score >= settings.quality_positive_threshold
        checks.append(
            QualityCheck(
                check_id=f"qc_{stamp}_{i:04d}",
                trace_id=f"trace_{stamp - int(rng.integers(0, 3_600_000))}_{int(rng.integers(0, 1000))}",
                span_id=f"span_{int(rng.integers(0, 10_000))}",
                check_type=check_type,
                score=round(score, 3),
                passed=passed,
                severity=Severity.low if passed else quality_severity(score, lower),
                details=_pick(rng, QUALITY_DETAILS[check_type]),
                timestamp=_iso(now - float(rng.random()) * 86400),
                model=_pick(rng, MODELS),
                provider=_pick(rng, PROVIDERS),
            )
        )
    return checks


def security_severity(roll: float) -> Severity:
    if roll < 0.1:
        return Severity.critical
    if roll < 0.3:
        return Severity.high
    if roll < 0.6:
        return Severity.medium
    return Severity.low


def demo_security_checks(count: Optional[int] = None, seed: Optional[int] = None, now: Optional[float] = None) -> List[SecurityCheck]:
    count = settings.checks_demo_count if count is None else max(0, count)
    rng = np.random.default_rng(settings.demo_seed if seed is None else seed)
    now = time.time() if now is None else now
    stamp = int(now * 1000)
    types = list(SecurityCheckType)
    locations = list(CheckLocation)

    checks: List[SecurityCheck] = []
    for i in range(count):
        check_type = _pick(rng, types)
        detected = bool(rng.random() < settings.security_detection_rate)
        severity = security_severity(float(rng.random())) if detected else Severity.low
        blocked = detected and (severity in (Severity.critical, Severity.high) or bool(rng.random() < 0.5))
        confidence = 0.7 + rng.random() * 0.3 if detected else 0.9 + rng.random() * 0.1
        checks.append(
            SecurityCheck(
                check_id=f"sc_{stamp}_{i:04d}",
                trace_id=f"trace_{stamp - int(rng.integers(0, 3_600_000))}_{int(rng.integers(0, 1000))}",
                span_id=f"span_{int(rng.integers(0, 10_000))}",
                check_type=check_type,
                detected=detected,
                severity=severity,
                confidence=round(float(confidence), 3),
                location=_pick(rng, locations),
                details=_pick(rng, SECURITY_DETECTED[check_type] if detected else SECURITY_CLEAN[check_type]),
                timestamp=_iso(now - float(rng.random()) * 86400),
                remediation=_pick(rng, REMEDIATIONS[check_type]) if detected else None,
                model=_pick(rng, MODELS),
                provider=_pick(rng, PROVIDERS),
                blocked=blocked,
            )
        )
    return checks
