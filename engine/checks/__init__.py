"""
LLM quality and security check results: normalization, scoring and summaries.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.checks.demo import demo_quality_checks, demo_security_checks
from engine.checks.records import quality_checks, security_checks
from engine.checks.scoring import (
    build_quality_report,
    build_security_report,
    pass_rate,
    quality_summary,
    risk_score,
    security_summary,
    trend,
)

__all__ = [
    "build_quality_report",
    "build_security_report",
    "demo_quality_checks",
    "demo_security_checks",
    "pass_rate",
    "quality_checks",
    "quality_summary",
    "risk_score",
    "security_checks",
    "security_summary",
    "trend",
]
