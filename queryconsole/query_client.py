import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from .config import Config
from .errors import ExecutionError, GenerationError, InvalidGenerationResponse
from .models import GeneratedQuery, GenerateRequest, GenerateResponse

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"
FALLBACK_EXECUTE_PATH = "/api/query"


def resolve_execute_path(endpoint: Optional[str]) -> str:
    """
    Map the endpoint returned by the generation call to a request path.

    A falsy endpoint falls back to /api/query; anything else is appended to
    /api verbatim. GeneratedQuery only lets through endpoints that start
    with '/'.
    """
    if not endpoint:
        return FALLBACK_EXECUTE_PATH
    return f"/api{endpoint}"


def describe_http_error(e: Exception) -> str:
    """Build an error message, adding the server's detail when it sent one."""
    error_message = str(e)
    if isinstance(e, httpx.HTTPStatusError):
        try:
            # Try to extract error detail from JSON response
            response_data = e.response.json()
            if isinstance(response_data, dict):
                detail = response_data.get("detail") or response_data.get("error")
                if detail:
                    error_message = f"{error_message} - {detail}"
        except ValueError:
            # Body is not JSON; the status line is all we have
            pass
    return error_message


class QueryClient:
    """
    An asynchronous HTTP client for the generation and execution endpoints.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initializes the asynchronous HTTP client.

        Args:
            base_url: Origin shared by both endpoints. Defaults to Config.
            timeout: Per-request timeout in seconds. Defaults to Config.
        """
        self.base_url = (base_url or Config.get_api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.get_http_timeout()

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
        )

    async def generate(self, prompt: str) -> GeneratedQuery:
        """
        Asks the generation endpoint to turn free-form text into a query.

        Args:
            prompt: The editor text, sent as {"prompt": prompt}.

        Returns:
            The structured query and the endpoint it should be executed on.

        Raises:
            GenerationError: On a non-2xx status or a transport failure.
            InvalidGenerationResponse: If the body lacks json.query, carries an
                endpoint that is not a path under /api, or is not JSON.
        """
        body = GenerateRequest(prompt=prompt).model_dump()
        try:
            logger.info("QueryClient: Requesting query generation...")
            response = await self.client.post(GENERATE_PATH, json=body)
            response.raise_for_status()
        except (httpx.RequestError, httpx.HTTPStatusError) as e:
            error_message = describe_http_error(e)
            logger.error(f"An error occurred while generating the query: {error_message}")
            status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            raise GenerationError(f"Query generation failed: {error_message}", status_code) from e

        try:
            generated = GenerateResponse.model_validate(response.json()).generated
        except ValueError as e:
            # pydantic.ValidationError and json.JSONDecodeError are both ValueErrors
            logger.error(f"Generation endpoint returned an unexpected body: {e}")
            detail = (
                "; ".join(err["msg"] for err in e.errors())
                if isinstance(e, ValidationError)
                else str(e)
            )
            raise InvalidGenerationResponse(
                f"Invalid generation response: {detail}", response.status_code
            ) from e

        logger.info(f"QueryClient: Generated query for endpoint {generated.endpoint!r}")
        return generated

    async def execute(self, query: Any, endpoint: Optional[str] = None) -> Any:
        """
        Sends a structured query to the execution endpoint.

        Args:
            query: The structured query, sent verbatim as the JSON body.
            endpoint: Path suffix under /api; falsy means /api/query.

        Returns:
            The decoded JSON response body.

        Raises:
            ExecutionError: On a non-2xx status, a transport failure, a path
                            httpx cannot build a URL from, or a body that
                            is not JSON.
        """
        path = resolve_execute_path(endpoint)
        try:
            logger.info(f"QueryClient: Executing query on {path}")
            response = await self.client.post(path, json=query)
            response.raise_for_status()
        except (httpx.RequestError, httpx.HTTPStatusError, httpx.InvalidURL) as e:
            error_message = describe_http_error(e)
            logger.error(f"An error occurred while executing the query: {error_message}")
            status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            raise ExecutionError(f"Query execution failed: {error_message}", status_code) from e

        try:
            result = response.json()
        except ValueError as e:
            logger.error(f"Execution endpoint returned a non-JSON body: {e}")
            raise ExecutionError(
                f"Query execution failed: response is not JSON ({e})", response.status_code
            ) from e

        logger.info("QueryClient: Successfully executed query.")
        return result

    async def close(self):
        """
        Closes the HTTP client session.
        """
        await self.client.aclose()

    async def __aenter__(self) -> "QueryClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
