from typing import Any, Dict, Optional

from datasources.base import ChecksConnector
from datasources.helpers import fetch_json

HEALTH_PATH = "/quality?limit=1"


class HttpChecksConnector(ChecksConnector):
    health_path = HEALTH_PATH

    def __init__(self, base_url: str, timeout: int = 10, headers: Optional[Dict[str, str]] = None):
        super().__init__(base_url, timeout=timeout, headers=headers)

    async def query_checks(self, kind: str, params: Dict[str, Any]) -> Dict[str, Any]:
        body = await fetch_json(
            f"{self.base_url}/{kind}",
            params={k: v for k, v in params.items() if v is not None},
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg=f"{kind} check query failed",
            timeout_msg=f"{kind} check query timed out",
            unavailable_msg="Cannot reach check results service at",
        )
        return body if isinstance(body, dict) else {"checks": body}
