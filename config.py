"""
Constants and configuration for Tracelens.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
from typing import Dict, List, Optional

from pydantic_settings import BaseSettings


TRACELENS_COORDINATOR_URL = os.getenv("TRACELENS_COORDINATOR_URL", "http://127.0.0.1:8001").rstrip("/")
TRACELENS_COORDINATOR_CHAT_URL = os.getenv("TRACELENS_COORDINATOR_CHAT_URL", "http://127.0.0.1:3001").rstrip("/")
TRACELENS_TRACING_URL = os.getenv("TRACELENS_TRACING_URL", "http://127.0.0.1:3001").rstrip("/")
TRACELENS_APM_DOMAIN_ID = os.getenv("TRACELENS_APM_DOMAIN_ID", "")
TRACELENS_CHECKS_URL = os.getenv("TRACELENS_CHECKS_URL", "").rstrip("/")

TRACELENS_DIAGNOSTICS_TIMEOUT = int(os.getenv("TRACELENS_DIAGNOSTICS_TIMEOUT", "15"))
TRACELENS_TRACING_TIMEOUT = int(os.getenv("TRACELENS_TRACING_TIMEOUT", "10"))
TRACELENS_STATUS_TIMEOUT = int(os.getenv("TRACELENS_STATUS_TIMEOUT", "5"))
TRACELENS_CHECKS_TIMEOUT = int(os.getenv("TRACELENS_CHECKS_TIMEOUT", "10"))
TRACELENS_STARTUP_TIMEOUT = int(os.getenv("TRACELENS_STARTUP_TIMEOUT", "60"))

DEFAULT_DATABASE = os.getenv("TRACELENS_DEFAULT_DATABASE", "ATPAdi")

# logical cache names; one ResponseCache per name
CACHE_SESSIONS = "sessions"
CACHE_TRACES = "traces"
CACHE_QUALITY = "quality"
CACHE_SECURITY = "security"
CACHE_COORDINATOR = "coordinator"

# natural-language commands understood by the coordinator's diagnostic agents
DIAGNOSTIC_COMMANDS: Dict[str, str] = {
    "blocking": "check blocking sessions on {database}",
    "parallel": "check parallelism for {database}",
    "sql_monitor": "show running SQL on {database}",
    "wait_events": "show wait events for {database}",
}

# weight values assigned to severity labels when computing risk scores
SEVERITY_WEIGHTS: dict[str, int] = {
    "low": 1,
    "medium": 5,
    "high": 20,
    "critical": 40,
}

# workflow stage id -> span name fragments (case-insensitive substring match)
STAGE_PATTERNS: Dict[str, List[str]] = {
    "input": ["input_node", "query_enhancement", "context_extraction"],
    "classifier": ["classifier_node", "intent_classification", "entity_extraction"],
    "router": ["router_node", "routing_decision", "determine_routing"],
    "workflow": ["workflow_node", "workflow_execution", "execute_workflow"],
    "parallel": ["parallel_node", "parallel_orchestrator", "multi_agent_execution"],
    "agent": ["agent_node", "agent_execution", "llm_invocation"],
    "action": ["action_node", "tool_execution", "mcp_call"],
    "output": ["output_node", "response_formatting", "format_response"],
}

HEALTH_PATH = "/status"


class Settings(BaseSettings):
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

    default_database: str = DEFAULT_DATABASE

    # response cache: (ttl seconds, max entries) per logical cache
    cache_limits: Dict[str, List[int]] = {
        CACHE_SESSIONS: [15, 50],
        CACHE_TRACES: [120, 20],
        CACHE_QUALITY: [60, 50],
        CACHE_SECURITY: [30, 50],
        CACHE_COORDINATOR: [10, 10],
    }

    # sql monitor hang detection
    hang_elapsed_threshold_seconds: float = 600.0
    hang_velocity_threshold: float = 10.0
    sql_text_max_length: int = 500

    # parallel execution defaults
    px_default_max_servers: int = 128

    # wait-event profile
    wait_events_limit: int = 10

    # span hierarchy: "first", "earliest" or "none"
    root_span_policy: str = "first"
    response_excerpt_length: int = 200
    default_routing_type: str = "WORKFLOW"

    # workflow aggregates
    workflow_percentiles: List[float] = [50.0, 95.0]

    # checks
    checks_default_limit: int = 50
    checks_demo_count: int = 200
    quality_negative_threshold: float = 0.3
    quality_positive_threshold: float = 0.7
    security_detection_rate: float = 0.15
    trend_stable_band_pct: float = 2.0

    # demo data
    demo_seed: Optional[int] = None
    demo_trace_limit: int = 10

    model_config = {
        "env_prefix": "TRACELENS_",
        "extra": "ignore",
    }


settings = Settings()
