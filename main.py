import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.ai.ai_routes import router as ai_router
from api.auth.auth_routes import router as auth_router
from api.essential.essential_routes import router as essential_router
from core.config import API_PREFIX, APP_VERSION, CORS_ORIGIN, ENABLE_UI, NODE_ENV, PORT
from core.database import create_conversation_store, create_user_store
from core.logger import setup_logging
from core.response import install_exception_handlers
from services.ai_service import AiService

logger = logging.getLogger("chatlingo")

API_ROUTES = [
    "POST /api/auth/register",
    "POST /api/auth/login",
    "POST /api/auth/refresh",
    "GET /api/auth/profile",
    "PUT /api/auth/profile",
    "GET /api/essential/categories",
    "GET /api/essential/categories/:id",
    "GET /api/essential/categories/:categoryId/content",
    "GET /api/essential/content/:contentId",
    "GET /api/ai/status",
    "GET /api/ai/personalities",
    "POST /api/ai/conversations",
    "GET /api/ai/conversations",
    "GET /api/ai/conversations/:conversationId",
    "POST /api/ai/conversations/:conversationId/messages",
    "POST /api/ai/assess",
    "GET /api/ai/recommendations",
]


def now_iso():
    return datetime.now(timezone.utc).isoformat()


def create_app(ai_service=None, conversation_store=None, user_store=None, enable_ui=ENABLE_UI):
    """Build the API app; injected services replace the configured defaults"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.users = user_store or create_user_store()
        app.state.conversations = conversation_store or await create_conversation_store()
        app.state.ai = ai_service or AiService()

        logger.info("ChatLingo API starting (env=%s, port=%s)", NODE_ENV, PORT)
        logger.info("AI model %s, configured=%s", app.state.ai.model, app.state.ai.is_configured())

        try:
            yield  # app runs here
        finally:
            await app.state.conversations.close()

    app = FastAPI(title="ChatLingo API", version=APP_VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[CORS_ORIGIN],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_exception_handlers(app)

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(auth_router)
    api.include_router(essential_router)
    api.include_router(ai_router)

    @api.get("/health")
    async def api_health():
        return {
            "status": "healthy",
            "message": "ChatLingo API is running",
            "timestamp": now_iso(),
            "routes": API_ROUTES,
        }

    @api.get("")
    async def api_info():
        return {
            "message": "ChatLingo API Server",
            "version": APP_VERSION,
            "features": [
                "Essential Learning System",
                "AI-Powered Dialogue",
                "Progress Tracking",
                "User Authentication",
            ],
            "endpoints": {
                "health": "/health",
                "api_health": f"{API_PREFIX}/health",
                "auth": f"{API_PREFIX}/auth/*",
                "essential": f"{API_PREFIX}/essential/*",
                "ai": f"{API_PREFIX}/ai/*",
            },
        }

    app.include_router(api)

    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "timestamp": now_iso(),
            "environment": NODE_ENV,
            "version": APP_VERSION,
        }

    if enable_ui:
        import gradio as gr
        from ui.chat import create_chat_page

        app = gr.mount_gradio_app(app, create_chat_page(), path="/chat")

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=PORT)
