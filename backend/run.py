#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.
For local development only - uses SQLite unless DATABASE_URL says otherwise.
"""
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

os.environ.setdefault("SITE_MODE", "local")

import uvicorn

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    print(f"Access at: http://localhost:{port}")
    print(f"API Docs: http://localhost:{port}/docs")

    uvicorn.run(
        "counselor_availability.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
