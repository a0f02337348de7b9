import os
from dotenv import load_dotenv
import logging

# --- Environment Loading Logic ---
ENVIRONMENT = os.getenv('ENVIRONMENT', 'dev-local')
logging.info(f"[Config] Initializing configuration for ENVIRONMENT='{ENVIRONMENT}'")

project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

if ENVIRONMENT == 'dev-local':
    # Prefer .env.local, fall back to .env
    dotenv_local_path = os.path.join(project_root, '.env.local')
    dotenv_path = os.path.join(project_root, '.env')
    load_path = dotenv_local_path if os.path.exists(dotenv_local_path) else dotenv_path
    if os.path.exists(load_path):
        load_dotenv(dotenv_path=load_path)

# --- Server ---
APP_NAME = "MyKnowledge API"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "API for managing notes, journals, and tags with user authentication"
APP_SERVER_HOST = os.getenv("APP_SERVER_HOST", "127.0.0.1")
APP_SERVER_PORT = int(os.getenv("APP_SERVER_PORT", 4000))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Auth (Clerk) ---
CLERK_JWT_KEY = os.getenv("CLERK_JWT_KEY")
CLERK_AUTHORIZED_PARTIES = [
    party.strip() for party in os.getenv("CLERK_AUTHORIZED_PARTIES", "").split(",") if party.strip()
]
ALGORITHMS = ["RS256"]
JWT_CLOCK_SKEW_SECONDS = int(os.getenv("JWT_CLOCK_SKEW_SECONDS", 5))

# --- Clerk Backend API ---
CLERK_SECRET_KEY = os.getenv("CLERK_SECRET_KEY")
CLERK_API_URL = os.getenv("CLERK_API_URL", "https://api.clerk.com/v1").rstrip("/")
CLERK_API_TIMEOUT = float(os.getenv("CLERK_API_TIMEOUT", 10))

# --- Database ---
MONGO_URI = os.getenv("MONGO_URI") or os.getenv("MONGODB_URI")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "myknowledge")

# --- Entity defaults ---
DEFAULT_TAG_COLOR = "#999"
