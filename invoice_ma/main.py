import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import settings
from .errors import InvoiceMaError
from .routes import api_router
from .routes.portal import router as portal_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="invoice_ma", debug=settings.debug)

app.include_router(api_router)
app.include_router(portal_router, tags=["portal"])


@app.exception_handler(InvoiceMaError)
async def invoice_ma_error_handler(request: Request, exc: InvoiceMaError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.get("/health", tags=["health"])
def health_check() -> dict:
    return {"status": "ok"}
