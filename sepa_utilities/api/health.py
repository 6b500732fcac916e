from fastapi import APIRouter
import time

from ..config import settings
from ..sepa.checksum import checksum_is_valid

router = APIRouter()

# DE21700519950000007229, rearranged for the MOD 97-10 check
SELF_TEST_DIGITS = "7005199500000072291314" + "21"


@router.get("/health")
async def health_check():
    """
    Health check endpoint for container orchestration.

    Returns basic health status of the service.
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "timestamp": time.time()
    }


@router.get("/health/ready")
async def readiness_check():
    """
    Readiness check - verifies the checksum tables compute a known IBAN.
    """
    checks = {
        "checksum": "ok" if checksum_is_valid(SELF_TEST_DIGITS) else "fail",
    }

    status = "ready" if all(v == "ok" for v in checks.values()) else "not_ready"

    return {
        "status": status,
        "checks": checks
    }
