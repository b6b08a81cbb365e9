"""Run the web front-end with uvicorn."""

import uvicorn

from psicocompany.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "psicocompany.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
