from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()


@router.get("/health")
async def health_check(request: Request) -> JSONResponse:
    """Health check endpoint for the order service."""
    report = await request.app.state.health_checker.run_checks()
    return JSONResponse(
        status_code=200 if report["status"] == "healthy" else 503, content=report
    )
