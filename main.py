#!/usr/bin/env python3
import logging
import os
import sys

import uvicorn

from cms_dashboard.app import create_app
from cms_dashboard.core.config import DEV_MODE

logger = logging.getLogger("cms_dashboard.main")

# Get the application directory - differs between normal execution and a frozen bundle
if getattr(sys, "frozen", False):
    application_path = os.path.dirname(sys.executable)
    os.chdir(application_path)
else:
    application_path = os.path.dirname(os.path.abspath(__file__))

# Create the FastAPI app
app = create_app()


if __name__ == "__main__":
    frozen = getattr(sys, "frozen", False)

    # When packaged, don't use reload and use a more restrictive host
    host = "127.0.0.1" if frozen else "0.0.0.0"
    reload_enabled = DEV_MODE and not frozen
    port = int(os.getenv("DASHBOARD_PORT", "8000"))

    logger.info(f"Starting CMS dashboard on {host}:{port} ({'development' if DEV_MODE else 'production'} mode)")
    logger.info(f"Application path: {application_path}")

    uvicorn.run("main:app", host=host, port=port, reload=reload_enabled)
