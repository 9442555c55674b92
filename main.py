#!/usr/bin/env python3
"""
Main entry point for the stream offer relay
"""

import uvicorn
from relay import create_app
from relay.config import Config
from relay.log import setup_logging

setup_logging()

# Create FastAPI application instance
app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=Config.HOST,
        port=Config.PORT,
        reload=Config.RELOAD
    )
