import secrets

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from trafficwatch.config import Settings, settings
from trafficwatch.schemas.check import CheckResponse
from trafficwatch.services.checker import run_check

router = APIRouter(prefix="/api/checks", tags=["checks"])
security = HTTPBearer(auto_error=False)


def get_settings() -> Settings:
    return settings


def require_trigger_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    current: Settings = Depends(get_settings),
) -> None:
    if not current.trigger_token:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trigger endpoint disabled")
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    if not secrets.compare_digest(credentials.credentials, current.trigger_token):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


@router.post("/run", response_model=CheckResponse, dependencies=[Depends(require_trigger_token)])
async def trigger_check(current: Settings = Depends(get_settings)):
    result = await run_check(current)
    return CheckResponse.from_result(result)
