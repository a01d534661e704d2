import logging

import uvicorn
from dotenv import load_dotenv

from api.server import app
from shared.config import settings

load_dotenv()

if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("api").info(f"Starting HeritageStamp Check-in API on port {settings.PORT}...")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
