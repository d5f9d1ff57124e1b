import os
from dotenv import load_dotenv

load_dotenv()

# App Configuration
NODE_ENV = os.getenv("NODE_ENV", "development")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
API_PREFIX = os.getenv("API_PREFIX", "/api")
PORT = int(os.getenv("PORT", "3000"))
BASE_URL = os.getenv("BASE_URL", f"http://127.0.0.1:{PORT}")
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "http://localhost:3001")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
ENABLE_UI = os.getenv("ENABLE_UI", "true").lower() in {"1", "true", "yes"}

# Auth Configuration
JWT_SECRET = os.getenv("JWT_SECRET", "fallback-secret")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = int(os.getenv("ACCESS_TOKEN_TTL", str(7 * 24 * 3600)))  # 7 days
REFRESH_TOKEN_TTL = int(os.getenv("REFRESH_TOKEN_TTL", str(30 * 24 * 3600)))  # 30 days

# AI Provider Configuration
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4")
HISTORY_WINDOW = int(os.getenv("HISTORY_WINDOW", "10"))

# Conversation Storage
CONVERSATION_BACKEND = os.getenv("CONVERSATION_BACKEND", "memory")  # memory | redis
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
CONVERSATION_TTL = int(os.getenv("CONVERSATION_TTL", "0"))  # 0 = never expire
