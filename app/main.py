import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.auth.router import router as auth_router
from app.cart.router import router as cart_router
from app.complaints.admin_router import router as complaints_admin_router
from app.complaints.router import router as complaints_router
from app.config import get_settings
from app.fertilizers.admin_router import router as fertilizers_admin_router
from app.fertilizers.router import router as fertilizers_router
from app.intake.admin_router import router as intake_admin_router
from app.intake.router import router as intake_router
from app.points.admin_router import router as points_admin_router
from app.points.router import router as points_router
from app.purchases.admin_router import router as purchases_admin_router
from app.purchases.router import router as purchases_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"Starting Eco Waste API ({settings.app_env})")
    yield
    # Shutdown


app = FastAPI(
    title="Eco Waste API",
    description="Backend API for waste pickups, eco-points and the fertilizer shop",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Admin routers go first so "/admin" is not captured by "/{id}" paths
app.include_router(auth_router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(points_admin_router, prefix="/api/v1/points/admin", tags=["points-admin"])
app.include_router(points_router, prefix="/api/v1/points", tags=["points"])
app.include_router(intake_admin_router, prefix="/api/v1/intake/admin", tags=["intake-admin"])
app.include_router(intake_router, prefix="/api/v1/intake", tags=["intake"])
app.include_router(
    fertilizers_admin_router, prefix="/api/v1/fertilizers/admin", tags=["fertilizers-admin"]
)
app.include_router(fertilizers_router, prefix="/api/v1/fertilizers", tags=["fertilizers"])
app.include_router(cart_router, prefix="/api/v1/cart", tags=["cart"])
app.include_router(
    purchases_admin_router, prefix="/api/v1/purchases/admin", tags=["purchases-admin"]
)
app.include_router(purchases_router, prefix="/api/v1/purchases", tags=["purchases"])
app.include_router(
    complaints_admin_router, prefix="/api/v1/complaints/admin", tags=["complaints-admin"]
)
app.include_router(complaints_router, prefix="/api/v1/complaints", tags=["complaints"])


@app.get("/health")
def health_check():
    return {"status": "healthy"}
