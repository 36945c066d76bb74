import logging
from contextlib import asynccontextmanager
from functools import partial
from pathlib import Path

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles

from routes.campaign_route import router as campaign_router
from routes.chat_ws import router as chat_router
from routes.credential_route import router as credential_router
from services.credentials.credential_gate import CredentialGate
from services.credentials.key_host import SubmittedKeyHost
from services.gemini.campaign_image import generate_campaign_image
from services.gemini.campaign_text import generate_campaign_text
from services.gemini.chat_session import create_chat_session
from services.image_preview import ImagePreviewer
from services.orchestration.campaign_orchestrator import CampaignOrchestrator
from utils.settings import KEY_HOST_SUBMITTED, load_settings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - settings and logging
      - the credential gate (resolved once at startup)
      - the campaign orchestrator and chat session factory
    and attach them to `app.state`.
    """
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.state.settings = settings

    key_host = SubmittedKeyHost() if settings.key_selection_host == KEY_HOST_SUBMITTED else None
    gate = CredentialGate(key_host, assume_authorized_without_host=settings.assume_authorized_without_host)
    await gate.check_availability()
    app.state.credential_gate = gate

    previewer = ImagePreviewer()
    app.state.image_previewer = previewer
    app.state.campaign_orchestrator = CampaignOrchestrator(
        gate,
        text_generator=partial(generate_campaign_text, settings=settings),
        image_generator=partial(generate_campaign_image, settings=settings),
        previewer=previewer,
    )
    app.state.chat_session_factory = partial(create_chat_session, settings=settings)

    LOGGER.info(
        "Campaign service ready (text=%s, image=%s, chat=%s)",
        settings.text_model,
        settings.image_model,
        settings.chat_model,
    )
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(title="MarketerAI", lifespan=lifespan)

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports the credential gate state.
        """
        gate = getattr(request.app.state, "credential_gate", None)
        return {
            "ok": True,
            "credentials": gate.state.to_dict() if gate is not None else None,
        }

    # Register application routers
    app.include_router(credential_router)
    app.include_router(campaign_router)
    app.include_router(chat_router)

    return app


app = create_app()
