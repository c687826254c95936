"""FastAPI application factory."""

import asyncio
import logging

from fastapi import FastAPI, Request, WebSocket, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from feedbridge.api.account import router as account_router
from feedbridge.api.babies import router as babies_router
from feedbridge.api.models import baby_to_dict
from feedbridge.app_logging import configure_logging
from feedbridge.containers import AppContainer
from feedbridge.domain.errors import (
    DecodeError,
    DuplicateBabyError,
    FeedbridgeError,
    NotFoundError,
    RemoteStoreError,
    UnauthenticatedError,
)
from feedbridge.services.live_sync import LiveBabySync, SyncUpdate

_ERROR_STATUS: dict[type[Exception], int] = {
    UnauthenticatedError: status.HTTP_401_UNAUTHORIZED,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    DuplicateBabyError: status.HTTP_409_CONFLICT,
    DecodeError: status.HTTP_502_BAD_GATEWAY,
    RemoteStoreError: status.HTTP_502_BAD_GATEWAY,
    FeedbridgeError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Feedbridge")
    app.state.container = container

    app.include_router(babies_router)
    app.include_router(account_router)

    async def handle_error(request: Request, exc: Exception) -> JSONResponse:
        status_code = _status_for(exc)
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("Request %s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    for error_type in _ERROR_STATUS:
        app.add_exception_handler(error_type, handle_error)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.websocket("/babies/{baby_id}/live")
    async def live_baby(
        websocket: WebSocket, baby_id: str, token: str | None = None
    ) -> None:
        """Stream the live snapshot of a baby until the client disconnects."""
        state_container: AppContainer = websocket.app.state.container
        user_id = (
            await run_in_threadpool(
                state_container.identity_provider.resolve_user_id, token
            )
            if token
            else None
        )
        if not user_id:
            await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
            return
        await websocket.accept()

        loop = asyncio.get_running_loop()
        updates: asyncio.Queue[SyncUpdate] = asyncio.Queue()
        sync = LiveBabySync(state_container.snapshot_source)
        sync.add_observer(
            lambda update: loop.call_soon_threadsafe(updates.put_nowait, update)
        )
        handle = sync.start_listening(user_id, baby_id)
        disconnected = asyncio.create_task(_wait_for_disconnect(websocket))
        try:
            while True:
                next_update = asyncio.create_task(updates.get())
                done, _ = await asyncio.wait(
                    {next_update, disconnected}, return_when=asyncio.FIRST_COMPLETED
                )
                if disconnected in done:
                    next_update.cancel()
                    break
                update = next_update.result()
                await websocket.send_json(
                    {
                        "baby": baby_to_dict(update.baby) if update.baby else None,
                        "error": update.error,
                        "loading": update.loading,
                    }
                )
        finally:
            disconnected.cancel()
            await run_in_threadpool(handle.cancel)
            logger.info("Live sync for baby %s closed", baby_id)

    return app


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


def _status_for(exc: Exception) -> int:
    for error_type in type(exc).__mro__:
        if error_type in _ERROR_STATUS:
            return _ERROR_STATUS[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR
