"""
DriverDesk Backend
==================
Entry point.  Run with ``python main.py`` or ``uvicorn main:app``.

Host, port, reload and log level come from ``API_HOST``, ``API_PORT``,
``API_RELOAD`` and ``LOG_LEVEL`` (see ``driverdesk.config``).
"""

import uvicorn

from driverdesk.api.app import create_app
from driverdesk.config import settings

app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
