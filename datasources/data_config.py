"""
Upstream collaborator settings: endpoint URLs, identifiers and timeouts.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    TRACELENS_COORDINATOR_URL,
    TRACELENS_COORDINATOR_CHAT_URL,
    TRACELENS_TRACING_URL,
    TRACELENS_APM_DOMAIN_ID,
    TRACELENS_CHECKS_URL,
    TRACELENS_DIAGNOSTICS_TIMEOUT,
    TRACELENS_TRACING_TIMEOUT,
    TRACELENS_STATUS_TIMEOUT,
    TRACELENS_CHECKS_TIMEOUT,
    TRACELENS_STARTUP_TIMEOUT,
)

class DataSourceSettings(BaseSettings):
    coordinator_url: str = TRACELENS_COORDINATOR_URL
    coordinator_chat_url: str = TRACELENS_COORDINATOR_CHAT_URL
    tracing_url: str = TRACELENS_TRACING_URL
    apm_domain_id: Optional[str] = TRACELENS_APM_DOMAIN_ID or None
    checks_url: Optional[str] = TRACELENS_CHECKS_URL or None
    diagnostics_timeout: int = TRACELENS_DIAGNOSTICS_TIMEOUT
    tracing_timeout: int = TRACELENS_TRACING_TIMEOUT
    status_timeout: int = TRACELENS_STATUS_TIMEOUT
    checks_timeout: int = TRACELENS_CHECKS_TIMEOUT
    startup_timeout: int = TRACELENS_STARTUP_TIMEOUT

    @field_validator("coordinator_url", "coordinator_chat_url", "tracing_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return str(v).strip().rstrip("/")

    @field_validator("apm_domain_id", "checks_url", mode="before")
    @classmethod
    def blank_is_missing(cls, v: Optional[str]) -> Optional[str]:
        value = str(v or "").strip().rstrip("/")
        return value or None

    model_config = {"env_prefix": "TRACELENS_", "extra": "ignore"}
