#!/usr/bin/env python3
"""Start the EcoTrack API with uvicorn."""

import uvicorn

from app.config.config import settings


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
    )
