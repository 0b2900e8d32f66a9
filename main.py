import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grievance_portal.api.errors import register_exception_handlers
from grievance_portal.core.config import settings
from grievance_portal.routers import auth, blockchain, grievances, users, verifications

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for the village grievance portal - citizens, panchayat officials and community verification",
    version="0.1.0",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router, prefix=settings.API_PREFIX, tags=["Authentication"])
app.include_router(users.router, prefix=settings.API_PREFIX, tags=["Users"])
app.include_router(grievances.router, prefix=settings.API_PREFIX, tags=["Grievances"])
app.include_router(verifications.router, prefix=settings.API_PREFIX, tags=["Verifications"])
app.include_router(blockchain.router, prefix=settings.API_PREFIX, tags=["Blockchain"])


@app.get(f"{settings.API_PREFIX}/health", tags=["Health"])
async def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
