from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from engine.enums import CheckLocation, QualityCheckType, SecurityCheckType, Severity


class QueryOptions(BaseModel):
    skip_cache: bool = False
    limit: Optional[int] = Field(default=None, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class Query(BaseModel):
    kind: str
    parameters: Dict[str, str] = Field(default_factory=dict)
    options: QueryOptions = Field(default_factory=QueryOptions)


class DiagnosticsQuery(BaseModel):
    database: Optional[str] = None
    skip_cache: bool = False


class TraceQuery(BaseModel):
    limit: int = Field(default=10, ge=1, le=100)
    root_policy: Optional[str] = Field(default=None, pattern="^(first|earliest|none)$")
    skip_cache: bool = False


class CheckQuery(BaseModel):
    limit: int = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)
    severity: Optional[Severity] = None
    trace_id: Optional[str] = None
    model: Optional[str] = None
    time_range: str = "24h"
    skip_cache: bool = False

    def filters(self) -> Dict[str, Any]:
        return {"severity": self.severity, "trace_id": self.trace_id, "model": self.model}

    def upstream_params(self) -> Dict[str, Any]:
        params = {
            "severity": self.severity.value if self.severity else None,
            "traceId": self.trace_id,
            "model": self.model,
            "timeRange": self.time_range,
        }
        return {k: v for k, v in params.items() if v is not None}

    def cache_params(self) -> Dict[str, Any]:
        params = self.model_dump(exclude={"skip_cache"})
        return {k: v for k, v in params.items() if v is not None}


class QualityQuery(CheckQuery):
    check_type: Optional[QualityCheckType] = None
    passed: Optional[bool] = None

    def filters(self) -> Dict[str, Any]:
        return {**super().filters(), "check_type": self.check_type, "passed": self.passed}

    def upstream_params(self) -> Dict[str, Any]:
        params = super().upstream_params()
        if self.check_type is not None:
            params["checkType"] = self.check_type.value
        if self.passed is not None:
            params["passed"] = "true" if self.passed else "false"
        return params


class SecurityQuery(CheckQuery):
    check_type: Optional[SecurityCheckType] = None
    detected: Optional[bool] = None
    location: Optional[CheckLocation] = None

    def filters(self) -> Dict[str, Any]:
        return {
            **super().filters(),
            "check_type": self.check_type,
            "detected": self.detected,
            "location": self.location,
        }

    def upstream_params(self) -> Dict[str, Any]:
        params = super().upstream_params()
        if self.check_type is not None:
            params["checkType"] = self.check_type.value
        if self.detected is not None:
            params["detected"] = "true" if self.detected else "false"
        if self.location is not None:
            params["location"] = self.location.value
        return params
