#api_gateway/routers/health.py

from fastapi import APIRouter

router = APIRouter()


@router.get("", include_in_schema=False)   # copre /health senza barra
@router.get("/", tags=["Healthcheck"])     # copre /health/ con barra
async def health_check():
    return {"status": "ok", "service": "gestione_affitti"}
