import logging
from typing import Any, Dict, Optional

from ariadne.asgi import GraphQL
from ariadne.asgi.handlers import GraphQLHTTPHandler
from ariadne.explorer import ExplorerHttp405
from ariadne.utils import unwrap_graphql_error
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from gpt_gateway.config import Settings, get_settings
from gpt_gateway.providers.base import ChatCompletionProvider, ProviderError
from gpt_gateway.providers.openai_chat import OpenAIChatProvider
from gpt_gateway.schema import schema

router = APIRouter(tags=["graphql"])

SETTINGS_SCOPE_KEY = "gpt_gateway.settings"
PROVIDER_SCOPE_KEY = "gpt_gateway.provider"


class _ResolverErrorFilter(logging.Filter):
    """Drop engine records for errors the resolvers have already logged."""

    def filter(self, record: logging.LogRecord) -> bool:
        error = record.exc_info[1] if record.exc_info else None
        return not isinstance(unwrap_graphql_error(error), ProviderError)


graphql_logger = logging.getLogger("gpt_gateway.graphql")
graphql_logger.addFilter(_ResolverErrorFilter())


class GatewayHTTPHandler(GraphQLHTTPHandler):
    async def create_json_response(
        self, request: Request, result: dict, success: bool
    ) -> JSONResponse:
        # A failing non-null root field nulls out "data" but the query still
        # executed; only documents rejected before execution carry no "data".
        status_code = 200 if success or "data" in result else 400
        return JSONResponse(result, status_code=status_code)


def get_provider_override() -> Optional[ChatCompletionProvider]:
    """Dependency hook for tests to inject a provider instance.

    In production this returns None so an `OpenAIChatProvider` is built from
    the current settings.
    """
    return None


def get_context_value(request: Request, data: Any) -> Dict[str, Any]:
    """Build the resolver context from values the route put on the scope."""
    return {
        "request": request,
        "settings": request.scope[SETTINGS_SCOPE_KEY],
        "provider": request.scope[PROVIDER_SCOPE_KEY],
    }


# Process-wide GraphQL app. GET executes `?query=` operations; a bare GET
# gets 405 instead of an interactive explorer page.
graphql_app = GraphQL(
    schema,
    context_value=get_context_value,
    explorer=ExplorerHttp405(),
    execute_get_queries=True,
    logger=graphql_logger,
    http_handler=GatewayHTTPHandler(),
    debug=False,
)


@router.api_route("/{path:path}", methods=["GET", "POST"])
async def handle_graphql(
    request: Request,
    settings: Settings = Depends(get_settings),
    provider: Optional[ChatCompletionProvider] = Depends(get_provider_override),
):
    """Serve GraphQL on any path not claimed by another router."""
    request.scope[SETTINGS_SCOPE_KEY] = settings
    request.scope[PROVIDER_SCOPE_KEY] = provider or OpenAIChatProvider.from_settings(
        settings
    )
    return await graphql_app.handle_request(request)
