"""
Production entrypoint for the TerraFusionPro appraisal engine.

This is the ONLY Uvicorn entrypoint used in production.
Binds to 0.0.0.0:$PORT.
"""

import logging

import uvicorn

from utils.config import Config
from utils.logging_config import configure_logging

if __name__ == "__main__":
    config = Config.load()
    configure_logging(config.log_level)
    logging.getLogger(__name__).info("Starting TerraFusionPro appraisal engine on port %d", config.port)

    # Import app here to ensure clean module loading
    from web.app import app

    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())
