import logging
import os

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from google.adk.cli.fast_api import get_fast_api_app

from solidity_inliner.config import Settings
from solidity_inliner.routes import router as contracts_router

load_dotenv()

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Directory that contains only the ADK agent packages (agents/contract_agent/ must include __init__.py and agent.py)
AGENTS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "agents")

# Configure CORS via env var or default to wildcard for local dev
# Example: export ALLOWED_ORIGINS="http://localhost:3000,https://yourapp.com"
ALLOWED_ORIGINS = Settings.from_env().allowed_origins

# Optionally serve the built-in ADK web UI
SERVE_WEB_INTERFACE = os.environ.get("ADK_SERVE_WEB", "true").lower() in ("1", "true", "yes")

# Build the FastAPI app with CORS configured
app: FastAPI = get_fast_api_app(
    agents_dir=AGENTS_DIR,
    allow_origins=ALLOWED_ORIGINS,
    web=SERVE_WEB_INTERFACE,
)

# Clean / resolve / compile endpoints alongside the agent API
app.include_router(contracts_router)


if __name__ == "__main__":
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8080"))
    uvicorn.run("server:app", host=host, port=port, reload=os.environ.get("RELOAD", "0") == "1")
