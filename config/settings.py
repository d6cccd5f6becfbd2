import os
from dotenv import load_dotenv

load_dotenv()

# API Configuration
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 8000))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./agency_ops.db")

# Comma separated list of origins allowed to call the API from a browser
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:8080").split(",")
    if origin.strip()
]

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL")

# AI Gateway Configuration (OpenAI-compatible chat completions endpoint)
AI_GATEWAY_URL = os.getenv("AI_GATEWAY_URL", "https://ai.gateway.lovable.dev/v1")
AI_GATEWAY_API_KEY = os.getenv("AI_GATEWAY_API_KEY")
AI_MODEL = os.getenv("AI_MODEL", "google/gemini-2.5-flash")
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", 1000))

# Bootstrap account created by `python -m database.seed`
SEED_COMPANY_NAME = os.getenv("SEED_COMPANY_NAME", "Agency")
SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL")
SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD")
SEED_ADMIN_NAME = os.getenv("SEED_ADMIN_NAME", "Super Admin")
