"""
Entry point for the tutorials service.

Run this application with:
    uvicorn main:app --reload

Or inside the container image:
    uvicorn main:app --host 0.0.0.0 --port 8080
"""

import uvicorn
from tutorials_api import create_app
from tutorials_core import configure_logging, tutorials_settings

configure_logging(tutorials_settings)

app = create_app(tutorials_settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=tutorials_settings.HOST,
        port=tutorials_settings.PORT,
        reload=tutorials_settings.is_development(),
        log_level=tutorials_settings.LOG_LEVEL.lower(),
    )
