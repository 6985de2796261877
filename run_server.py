#!/usr/bin/env python3
"""Development server runner for Quiz Conquest."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "src.server.main:app",
        host="127.0.0.1",
        port=9000,
        reload=True,  # Auto-reload on code changes
        log_level="info",
    )
