#!/usr/bin/env python3
"""
Run the TerraFusionPro appraisal engine locally.
"""

import uvicorn

from utils.config import Config
from utils.logging_config import configure_logging


def main():
    """Start the web server."""
    config = Config.load()
    configure_logging(config.log_level)

    print(f"Starting TerraFusionPro appraisal engine on http://{config.host}:{config.port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "web.app:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
