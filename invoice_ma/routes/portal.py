from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import NotFound
from ..services import clients as clients_service

router = APIRouter()
TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/portal/{client_id}", response_class=HTMLResponse)
def client_portal_page(
    client_id: int, request: Request, db: Session = Depends(get_db)
) -> HTMLResponse:
    try:
        client, invoices, owner = clients_service.portal_data(db, client_id)
    except NotFound:
        return templates.TemplateResponse(
            request,
            "portal/not_found.html",
            {"client_id": client_id},
            status_code=404,
        )
    return templates.TemplateResponse(
        request,
        "portal/index.html",
        {
            "client": client,
            "invoices": invoices,
            "company": owner.company_settings if owner else None,
        },
    )
