import logging
import uvicorn
from fastapi import FastAPI
from docrelay.api.routers import upload
from docrelay.core.config import settings

logging.basicConfig(level=settings.LOG_LEVEL.upper())

# Create FastAPI application
app = FastAPI(title=settings.PROJECT_NAME)

# Include routers
app.include_router(upload.router)

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=True)
