import httpx
from typing import Any, Optional
from adsgen.config import settings
from adsgen.logging_config import setup_logger

logger = setup_logger(__name__)


class ToolExecutionError(Exception):
    """A Composio tool call failed, either at the HTTP level or in the tool itself"""

    def __init__(self, tool_name: str, message: str):
        self.tool_name = tool_name
        super().__init__(message)


class ComposioClient:
    """Thin REST client for Composio tool execution"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        user_id: Optional[str] = None,
        version: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else settings.composio_api_key
        self.base_url = (base_url or settings.composio_base_url).rstrip("/")
        self.user_id = user_id or settings.composio_user_id
        self.version = version or settings.composio_tool_version
        self.timeout = timeout or settings.composio_timeout

        if not self.api_key:
            logger.warning("COMPOSIO_API_KEY is not set. Composio tools will not work.")

    def _get_headers(self) -> dict:
        return {
            "x-api-key": self.api_key,
            "Content-Type": "application/json"
        }

    async def execute(self, tool_name: str, params: dict) -> Any:
        """Run a Composio tool and return its `data` payload"""
        endpoint = f"{self.base_url}/tools/execute/{tool_name}"
        payload = {
            "user_id": self.user_id,
            "arguments": params,
            "version": self.version
        }

        logger.info(f"Executing tool {tool_name}, argument_keys={list(params.keys())}")

        async with httpx.AsyncClient() as http_client:
            response = await http_client.post(
                endpoint,
                json=payload,
                headers=self._get_headers(),
                timeout=self.timeout
            )

        if response.status_code != 200:
            logger.error(f"Composio tool execution error ({tool_name}): status={response.status_code}")
            logger.error(f"Composio response: {response.text[:1000]}")
            raise ToolExecutionError(tool_name, f"API error: {response.status_code} - {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"Composio tool execution error ({tool_name}): non-JSON response")
            raise ToolExecutionError(tool_name, f"Invalid JSON response: {e} - {response.text[:200]}")

        if not isinstance(result, dict):
            logger.error(f"Composio tool execution error ({tool_name}): unexpected payload {type(result).__name__}")
            raise ToolExecutionError(tool_name, f"Unexpected response payload: {result!r}")

        if not result.get("successful"):
            message = result.get("error") or f"Tool {tool_name} failed"
            logger.error(f"Composio tool execution error ({tool_name}): {message}")
            raise ToolExecutionError(tool_name, message)

        return result.get("data")
