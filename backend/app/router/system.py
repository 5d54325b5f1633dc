from fastapi import APIRouter

from app.core.config import (
    APP_NAME,
    APP_VERSION,
    CONVERGENCE_MAX_SPAN_DAYS,
    ENVIRONMENT,
    SIMILARITY_THRESHOLD,
)
from app.models.common import APIResponse

router = APIRouter(tags=["System"])


@router.get("/", response_model=APIResponse)
def root():
    return APIResponse(
        code=0,
        msg="ok",
        data={"msg": f"{APP_NAME}. Scheduling endpoints live under /trips/{{trip_id}}/scheduling."},
    )


@router.get("/health", response_model=APIResponse)
def health_check():
    return APIResponse(
        code=0,
        msg="ok",
        data={
            "status": "healthy",
            "service": "trip_scheduling-server",
            "version": APP_VERSION,
            "environment": ENVIRONMENT,
            "engine": {
                "similarity_threshold": SIMILARITY_THRESHOLD,
                "convergence_max_span_days": CONVERGENCE_MAX_SPAN_DAYS,
            },
        },
    )
