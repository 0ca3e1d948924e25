#!/usr/bin/env python3
"""
Startup script for the Task Manager Backend
Starts the FastAPI app factory under uvicorn using settings from the environment
"""

import uvicorn
from taskman.config.settings import Settings

def main():
    settings = Settings.from_env()

    print("Starting Task Manager Backend Server...")
    print(f"Host: {settings.host}")
    print(f"Port: {settings.port}")
    print(f"Reload: {settings.reload}")
    print("=" * 50)

    # Start the server
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower()
    )

if __name__ == "__main__":
    main()
