import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.nearby import router as nearby_router
from api.tracking import registry, router as tracking_router
from engine.catalog import load_heritage_catalog

logger = logging.getLogger("api")

app = FastAPI(title="HeritageStamp Check-in API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# GPS tracking sessions (Kalman filter)
app.include_router(tracking_router)

# Nearby ranking + check-in router
app.include_router(nearby_router)


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "version": "1.0",
        "catalog_size": len(load_heritage_catalog()),
        "active_sessions": len(registry),
    }


@app.get("/api/v1/sites")
def list_sites():
    """Returns the bundled heritage catalog."""
    return {
        "success": True,
        "data": [
            {
                "id": poi.id,
                "name": poi.name,
                "name_en": poi.name_en,
                "location": {"lat": poi.latitude, "lng": poi.longitude},
                "has_bounding_area": poi.bounding_area is not None,
            }
            for poi in load_heritage_catalog()
        ],
    }
