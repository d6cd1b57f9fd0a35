#!/usr/bin/env python3
"""Run script for araise."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "araise.api.app:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
