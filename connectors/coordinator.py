from typing import Any, Dict, List, Optional

from datasources.base import CoordinatorConnector
from datasources.exceptions import MalformedPayload
from datasources.helpers import fetch_json, post_json

HEALTH_PATH = "/status"


class HttpCoordinatorConnector(CoordinatorConnector):
    health_path = HEALTH_PATH

    def __init__(
        self,
        base_url: str,
        chat_url: str,
        timeout: int = 15,
        status_timeout: int = 5,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(base_url, timeout=timeout, headers=headers)
        self.chat_url = str(chat_url).rstrip("/")
        self.status_timeout = status_timeout

    async def chat(self, message: str) -> Dict[str, Any]:
        body = await post_json(
            f"{self.chat_url}/chat",
            {"message": message},
            headers=self._headers(),
            timeout=self.timeout,
            invalid_msg="Coordinator chat failed",
            timeout_msg="Coordinator chat timed out",
            unavailable_msg="Cannot reach coordinator at",
        )
        if not isinstance(body, dict):
            return {"data": body}
        # agents reply with records under "data" or "result"; older ones inline them
        payload = body.get("data") or body.get("result") or body
        return payload if isinstance(payload, dict) else {"data": payload}

    async def status(self) -> Dict[str, Any]:
        return await fetch_json(
            f"{self.base_url}/status",
            headers=self._headers(),
            timeout=self.status_timeout,
            invalid_msg="Coordinator status failed",
            timeout_msg="Coordinator status timed out",
            unavailable_msg="Cannot reach coordinator at",
        )

    async def tools(self, limit: int = 100) -> List[Dict[str, Any]]:
        body = await fetch_json(
            f"{self.base_url}/tools",
            params={"limit": limit},
            headers=self._headers(),
            timeout=self.status_timeout,
            invalid_msg="Coordinator tools listing failed",
            timeout_msg="Coordinator tools listing timed out",
            unavailable_msg="Cannot reach coordinator at",
        )
        tools = body.get("tools") if isinstance(body, dict) else body
        if tools is None:
            return []
        if not isinstance(tools, (list, tuple)):
            raise MalformedPayload(f"Coordinator tools listing is not a list: {type(tools).__name__}")
        return [t for t in tools if isinstance(t, dict)]
