import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pawpath.config import settings
from pawpath.models.request import CustomRouteRequest
from pawpath.models.response import RouteRecommendation
from pawpath.models.walk import WalkRecord
from pawpath.services.route.errors import RouteServiceError
from pawpath.services.route_service import CustomRouteService

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

_route_service: Optional[CustomRouteService] = None


def get_route_service() -> CustomRouteService:
    """Shared service instance; collaborators are created on first use"""
    global _route_service
    if _route_service is None:
        _route_service = CustomRouteService(config=settings)
    return _route_service


def get_current_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity as forwarded by the authenticating proxy"""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="You must be logged in to save walks.")
    return x_user_id.strip()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("PawPath API starting (AI routes enabled: %s)", settings.ai_recommendations_enabled)
    yield
    if _route_service is not None:
        await _route_service.close()
    logger.info("Shutdown complete")


app = FastAPI(
    title="PawPath API",
    description="Dog-walking route generation API",
    version=settings.api_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RouteServiceError)
async def route_service_error_handler(request: Request, exc: RouteServiceError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "category": exc.category},
    )


@app.post("/api/v1/routes/custom", response_model=RouteRecommendation)
async def generate_custom_route(
    request: CustomRouteRequest,
    service: CustomRouteService = Depends(get_route_service),
):
    """Generate a custom dog-walking route around a location"""
    return await service.generate_custom_route(request.location, request.preferences)


@app.post("/api/v1/walks", response_model=WalkRecord)
async def save_generated_walk(
    route: RouteRecommendation,
    user_id: str = Depends(get_current_user_id),
    service: CustomRouteService = Depends(get_route_service),
):
    """Save a previously generated route as a walk"""
    return await service.save_generated_walk(route, user_id)


@app.get("/health")
async def health_check():
    """Health check"""
    return {
        "status": "healthy",
        "version": settings.api_version,
        "ai_routes_enabled": settings.ai_recommendations_enabled,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
