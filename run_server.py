"""
Run the PatternSight analysis server.
"""
import os

# Load environment before settings are read
from dotenv import load_dotenv

root_dir = os.path.dirname(os.path.abspath(__file__))
load_dotenv(os.path.join(root_dir, ".env"))

import uvicorn

from patternsight.core.config import settings

if __name__ == "__main__":
    print("Starting PatternSight Analysis Server...")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "patternsight.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
