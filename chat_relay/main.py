"""FastAPI application entrypoint."""

from dataclasses import dataclass
import logging
import os
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel, ConfigDict

from chat_relay.config import Settings, load_environment_from_dotenv, load_routing_table
from chat_relay.constants import CORS_HEADERS
from chat_relay.logging_config import configure_logging
from chat_relay.services.credentials import EnvironmentCredentialStore
from chat_relay.services.forwarder import ChatForwarder
from chat_relay.services.relay_models import RelayRequest, RelayResponse
from chat_relay.services.routing_table import RoutingTable
from chat_relay.services.upstream_client import UpstreamChatClient


logger = logging.getLogger(__name__)
_PACKAGE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(_PACKAGE_DIR / "templates"))

CHAT_PATH = "/api/chat"


class ModelOptionResponse(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    model_id: str
    display_name: str
    provider: str


class ModelListResponse(BaseModel):
    models: list[ModelOptionResponse]


@dataclass(frozen=True)
class AppServices:
    routing_table: RoutingTable
    forwarder: ChatForwarder


def create_app() -> FastAPI:
    dotenv_loaded = load_environment_from_dotenv(".env")
    settings = Settings.from_env()
    configure_logging(settings.app_log_level)
    logger.info("application_startup_dotenv_loaded loaded=%s", dotenv_loaded)
    services = _build_services(settings)
    application = FastAPI(title="Chat Relay")
    application.mount(
        "/static",
        StaticFiles(directory=str(_PACKAGE_DIR / "static")),
        name="static",
    )
    _register_routes(application, services)
    return application


def _build_services(settings: Settings) -> AppServices:
    routing_table = RoutingTable(load_routing_table(settings.routing_table_path))
    credentials = EnvironmentCredentialStore(os.environ)
    routing_table.find_missing_credentials(credentials)
    forwarder = ChatForwarder(
        routing_table=routing_table,
        credentials=credentials,
        upstream_client=UpstreamChatClient(),
    )
    return AppServices(routing_table=routing_table, forwarder=forwarder)


def _register_routes(app: FastAPI, services: AppServices) -> None:
    _register_index_route(app)
    _register_health_route(app, services)
    _register_models_route(app, services)
    _register_chat_route(app, services)


def _register_index_route(app: FastAPI) -> None:
    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        logger.info("index_page_requested")
        return templates.TemplateResponse(
            request=request,
            name="index.html",
            context={"chat_path": CHAT_PATH},
        )


def _register_health_route(app: FastAPI, services: AppServices) -> None:
    @app.get("/health")
    async def health() -> dict[str, str]:
        logger.info("health_check_requested model_count=%s", len(services.routing_table))
        return {"status": "ok"}


def _register_models_route(app: FastAPI, services: AppServices) -> None:
    @app.get("/api/models")
    async def list_models() -> JSONResponse:
        options = services.routing_table.list_model_options()
        logger.info("models_list_requested model_count=%s", len(options))
        body = ModelListResponse(
            models=[
                ModelOptionResponse(
                    model_id=option.model_id,
                    display_name=option.display_name,
                    provider=option.provider,
                )
                for option in options
            ]
        )
        return JSONResponse(content=body.model_dump(), headers=dict(CORS_HEADERS))


def _register_chat_route(app: FastAPI, services: AppServices) -> None:
    async def chat(request: Request) -> Response:
        relay_request = RelayRequest(
            method=request.method,
            headers=request.headers,
            body=await request.body(),
        )
        relay_response = await services.forwarder.handle(relay_request)
        logger.info(
            "chat_endpoint_completed method=%s status=%s",
            request.method,
            relay_response.status_code,
        )
        return _to_http_response(relay_response)

    # No method filter: the forwarder owns the 405 reply and its CORS headers.
    app.add_route(CHAT_PATH, chat, include_in_schema=False)


def _to_http_response(relay_response: RelayResponse) -> Response:
    headers = dict(relay_response.headers)
    if relay_response.payload is None:
        return Response(status_code=relay_response.status_code, headers=headers)
    if isinstance(relay_response.payload, str):
        return PlainTextResponse(
            relay_response.payload,
            status_code=relay_response.status_code,
            headers=headers,
        )
    return JSONResponse(
        content=relay_response.payload,
        status_code=relay_response.status_code,
        headers=headers,
    )
