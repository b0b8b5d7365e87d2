from fastapi import FastAPI
from config.database import Database
from config.settings import warn_on_default_secret
from routes import (
    auth_routes,
    user_routes,
    shop_routes,
    booking_routes,
    notification_routes,
    service_routes,
    admin_routes
)
import uvicorn
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

logger = logging.getLogger(__name__)

app = FastAPI(title="Local Shop Booking API")

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include all routers
app.include_router(auth_routes.router, prefix="/api/auth", tags=["auth"])
app.include_router(user_routes.router, prefix="/api/users", tags=["users"])
app.include_router(shop_routes.router, prefix="/api/shops", tags=["shops"])
app.include_router(booking_routes.router, prefix="/api/bookings", tags=["bookings"])
app.include_router(notification_routes.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(service_routes.router, prefix="/api/services", tags=["services"])
app.include_router(admin_routes.router, prefix="/api/admin", tags=["admin"])


@app.on_event("startup")
async def startup_db_client():
    warn_on_default_secret()
    try:
        await Database.connect_db()
    except Exception as e:
        logger.error(f"Error during startup: {str(e)}")
        raise


@app.on_event("shutdown")
async def shutdown_db_client():
    try:
        await Database.close_db()
    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Local Shop Booking API"}


if __name__ == "__main__":
    port = int(os.environ.get("PORT", "10000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
