from typing import Any, Dict, Optional

from datasources.base import TracingConnector
from datasources.helpers import fetch_json

HEALTH_PATH = "/apm/traces?limit=1"


class ApmTracingConnector(TracingConnector):
    health_path = HEALTH_PATH

    def __init__(
        self,
        base_url: str,
        domain_id: Optional[str],
        timeout: int = 10,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(base_url, timeout=timeout, headers=headers)
        self.domain_id = domain_id

    def _params(self, **extra: Any) -> Dict[str, Any]:
        params: Dict[str, Any] = dict(extra)
        if self.domain_id:
            params["domainId"] = self.domain_id
        return params

    async def list_traces(self, limit: int) -> Dict[str, Any]:
        return await fetch_json(
            f"{self.base_url}/apm/traces",
            params=self._params(limit=limit),
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="APM trace query failed",
            timeout_msg="APM trace query timed out",
            unavailable_msg="Cannot reach APM at",
        )

    async def get_trace(self, trace_key: str) -> Dict[str, Any]:
        return await fetch_json(
            f"{self.base_url}/apm/trace/{trace_key}",
            params=self._params(),
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="APM trace lookup failed",
            timeout_msg="APM trace lookup timed out",
            unavailable_msg="Cannot reach APM at",
        )
