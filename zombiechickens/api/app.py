"""
FastAPI Application - JSON API over the single game session.

Endpoints:
    POST   /api/v1/lobby/join     Join the lobby, returns a session id
    GET    /api/v1/lobby          List lobby players
    POST   /api/v1/game/start     Start the game (first player only)
    GET    /api/v1/game/state     Game state as seen by ?session_id=
    POST   /api/v1/game/input     Answer the pending prompt
    POST   /api/v1/game/reset     Discard the game and reopen the lobby

Clients poll /game/state; whoever `prompt.player_index` names answers
via /game/input.
"""

from typing import Optional, Union
import os

from .. import __version__

# Environment configuration
ZC_ENV = os.getenv("ZC_ENV", "development")
ZC_SEED = os.getenv("ZC_SEED")
ZC_DEBUG_EVENTS = os.getenv("ZC_DEBUG_EVENTS", "").lower() in ("1", "true", "yes")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

# HTTP status for each refused request; anything else is a 400.
ERROR_STATUS = {
    "PLAYER_NOT_FOUND": 404,
    "NOT_YOUR_TURN": 403,
    "NOT_HOST": 403,
    "GAME_ALREADY_STARTED": 409,
    "GAME_NOT_STARTED": 409,
    "GAME_OVER": 409,
    "GAME_FULL": 409,
    "NO_INPUT_NEEDED": 409,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    from fastapi import FastAPI, Query
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    from ..session import GameSession
    from .service import APIService
    from .schemas import (
        JoinRequest,
        StartRequest,
        InputRequest,
        JoinResponse,
        LobbyResponse,
        GameStateResponse,
        InputResponse,
        ResetResponse,
        ErrorResponse,
        HealthResponse,
    )

    app = FastAPI(
        title="Zombie Chickens API",
        description="""
Multiplayer Zombie Chickens over HTTP.

## Flow

1. Every player calls `POST /api/v1/lobby/join` and keeps its `session_id`
2. The first player calls `POST /api/v1/game/start`
3. Clients poll `GET /api/v1/game/state?session_id=...`
4. The player named by `prompt.player_index` answers with `POST /api/v1/game/input`
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def new_session() -> GameSession:
        return GameSession(
            seed=int(ZC_SEED) if ZC_SEED else None,
            debug_events=ZC_DEBUG_EVENTS,
        )

    api_service = service or APIService(session_factory=new_session)

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Wrap an ErrorResponse with the matching HTTP status."""
        return JSONResponse(
            status_code=ERROR_STATUS.get(error.error_code.value, 400),
            content=error.model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    # =========================================================================
    # Lobby Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/lobby/join",
        response_model=JoinResponse,
        responses={409: {"model": ErrorResponse}},
        tags=["Lobby"],
        summary="Join the lobby",
    )
    async def join_lobby(request: JoinRequest) -> Union[JoinResponse, JSONResponse]:
        """Join with a display name. Duplicate names get a numeric suffix."""
        return respond(api_service.join(request.name))

    @app.get(
        "/api/v1/lobby",
        response_model=LobbyResponse,
        tags=["Lobby"],
        summary="List lobby players",
    )
    async def get_lobby() -> LobbyResponse:
        return api_service.lobby()

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/game/start",
        response_model=InputResponse,
        responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start the game",
    )
    async def start_game(request: StartRequest) -> Union[InputResponse, JSONResponse]:
        """Deal the game and run it up to the first prompt."""
        return respond(api_service.start(request.session_id))

    @app.get(
        "/api/v1/game/state",
        response_model=GameStateResponse,
        responses={409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get game state",
    )
    async def get_game_state(
        session_id: Optional[str] = Query(default=None, description="Your session id"),
    ) -> Union[GameStateResponse, JSONResponse]:
        """Current state. Your own hand is only included when you pass your session id."""
        return respond(api_service.get_state(session_id))

    @app.post(
        "/api/v1/game/input",
        response_model=InputResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Choice not in valid_choices"},
            403: {"model": ErrorResponse, "description": "Not your turn"},
            409: {"model": ErrorResponse},
        },
        tags=["Game"],
        summary="Answer the pending prompt",
    )
    async def submit_input(request: InputRequest) -> Union[InputResponse, JSONResponse]:
        return respond(api_service.submit_input(request.session_id, request.choice))

    @app.post(
        "/api/v1/game/reset",
        response_model=ResetResponse,
        tags=["Game"],
        summary="Reset the session",
    )
    async def reset_game() -> ResetResponse:
        return api_service.reset()

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        """Health check endpoint for load balancers."""
        return HealthResponse(version=__version__)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Zombie Chickens API",
            "version": __version__,
            "env": ZC_ENV,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app
