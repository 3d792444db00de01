from fastapi import FastAPI
from config import settings
from store_client import lifespan
from routes import (
    analytics_routes, auth_routes, driver_routes, notification_routes,
    package_routes, pricing_routes, route_routes, user_routes,
)

app = FastAPI(
    title="KingX Delivery",
    root_path="/api",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "ok"}

# Include routers
app.include_router(auth_routes.router, tags=["Authentication"])
app.include_router(user_routes.router, tags=["Users"])
app.include_router(pricing_routes.router, tags=["Pricing"])
app.include_router(package_routes.router, tags=["Packages"])
app.include_router(driver_routes.router, tags=["Drivers"])
app.include_router(route_routes.router, tags=["Routes"])
app.include_router(notification_routes.router, tags=["Notifications"])
app.include_router(analytics_routes.router, tags=["Analytics"])

if __name__ == "__main__":
    import uvicorn
    print(f"PORT {settings.PORT}")
    print(f"STORAGE_BACKEND {settings.STORAGE_BACKEND}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
