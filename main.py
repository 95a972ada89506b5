from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config.settings import get_settings
from core.logger import setup_logging
from modules.proposal.routes import router as proposal_router

settings = get_settings()
setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Claims metrics • ROI projections • Proposal data"
)

# === CORS: Allow frontend to call backend ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(proposal_router)

@app.get("/")
async def root():
    return {"message": "Claims Proposal API - Metrics Ready"}

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
