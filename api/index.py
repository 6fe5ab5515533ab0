import logging
from app.main import app

logger = logging.getLogger(__name__)

logger.info("Vercel api/index.py initialized")

# Entry point for Vercel Serverless Functions: exports the FastAPI app instance
