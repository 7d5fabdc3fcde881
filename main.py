from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import uvicorn

import config
from routers import navigation, positioning

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Indoor Wayfinding API",
    description="Shortest paths, turn-by-turn directions and beacon positioning for indoor navigation",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Health check endpoint (must be before other routes for priority)
@app.get("/health")
async def health_check():
    return {"status": "healthy", "message": "Indoor Wayfinding API is running"}

@app.get("/")
async def root():
    return {"message": "Indoor Wayfinding API", "version": "1.0.0", "status": "online"}

# Include routers
app.include_router(navigation.router, prefix="/navigation", tags=["navigation"])
app.include_router(positioning.router, prefix="/positioning", tags=["positioning"])

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
