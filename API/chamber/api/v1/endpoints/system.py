from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from chamber.api import deps
from chamber.services.email import EmailService

router = APIRouter()


@router.get("/health")
def health_check() -> Any:
    return {
        "message": "Server is running",
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/services/status")
def services_status(email: EmailService = Depends(deps.get_email_service)) -> Any:
    """Which outbound email providers are configured."""
    return {
        "emailServices": email.status(),
        "message": "Service status retrieved",
    }
