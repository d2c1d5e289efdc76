from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from dotenv import load_dotenv

load_dotenv()

from config.settings import settings
from core.logger import setup_logger
from api import compress, remove_background, recognize, classify, generate

setup_logger(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(compress.router, prefix=settings.API_PREFIX)
app.include_router(remove_background.router, prefix=settings.API_PREFIX)
app.include_router(recognize.router, prefix=settings.API_PREFIX)
app.include_router(classify.router, prefix=settings.API_PREFIX)
app.include_router(generate.router, prefix=settings.API_PREFIX)

logger.info("%s %s ready", settings.PROJECT_NAME, settings.VERSION)

@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} is running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.get("/api/health")
async def api_health_check():
    return {"status": "healthy", "service": "api"}

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", settings.PORT))
    uvicorn.run(app, host=settings.HOST, port=port)
