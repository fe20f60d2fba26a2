from __future__ import annotations

import uvicorn

from fiatlux.config import load_settings


if __name__ == "__main__":
    settings = load_settings()
    uvicorn.run(
        "fiatlux.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
