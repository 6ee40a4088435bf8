# cms_dashboard/core/config.py
"""Environment-driven settings for the dashboard."""

import os

from dotenv import load_dotenv

load_dotenv()

# ===== HOST DATABASE =====
# The content-management platform's own database; this app only reads it.
HOST_DATABASE_URL = os.getenv("HOST_DATABASE_URL", "sqlite:///./host.db")

# ===== HOST URL RESOLUTION =====
# Lookup endpoint used to turn a node id into its public URL. "{id}" is replaced with the node id.
HOST_CONTENT_API_URL = os.getenv("HOST_CONTENT_API_URL", "http://localhost:5000/api/content/{id}")
HOST_SITE_URL = os.getenv("HOST_SITE_URL", "http://localhost:5000/")
URL_RESOLVE_TIMEOUT = float(os.getenv("URL_RESOLVE_TIMEOUT", "5"))
WARMUP_TIMEOUT = float(os.getenv("WARMUP_TIMEOUT", "10"))

# ===== APPLICATION =====
APPLICATION_ID = os.getenv("APPLICATION_ID", "Unknown")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEV_MODE = os.getenv("DASHBOARD_DEV_MODE", "false").lower() == "true"
