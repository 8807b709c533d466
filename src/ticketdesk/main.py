import logging

from fastapi import FastAPI

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from .api import auth_router, build_api_router
from .api.exception_handlers import register_exception_handlers
from .config import get_config

config = get_config()

logging.basicConfig(
    level=getattr(logging, config.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="TicketDesk", debug=config.debug)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(build_api_router(config.api_prefix))


@app.get("/health")
def health():
    """Liveness check; does not touch Supabase."""
    return {"status": "ok", "environment": config.environment}


logger.info(f"TicketDesk API ready (prefix: {config.api_prefix})")
