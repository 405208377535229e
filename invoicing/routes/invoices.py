from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Form, HTTPException, Query
from fastapi.responses import JSONResponse, RedirectResponse

from ..logs import LogContext
from ..services.invoice_svc import (
    ActionState,
    create_invoice,
    update_invoice,
    delete_invoice,
    get_invoice_for_edit,
    list_invoices,
)

router = APIRouter()


def _action_response(state: ActionState):
    if state.redirect_to and not state.failed:
        # 303 so the browser follows up with a GET on the listing
        return RedirectResponse(state.redirect_to, status_code=303)
    code = 400 if state.errors else (500 if state.failed else 200)
    return JSONResponse(state.to_dict(), status_code=code)


@router.get("/dashboard/invoices")
def api_invoice_list(query: str = "", page: int = Query(1, ge=1)):
    return list_invoices(query, page)


@router.get("/dashboard/invoices/{invoice_id}")
def api_invoice_get(invoice_id: str):
    it = get_invoice_for_edit(invoice_id)
    if it is None:
        raise HTTPException(status_code=404, detail="invoice_not_found")
    return it


@router.post("/dashboard/invoices/create")
def api_invoice_create(
    customerId: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
):
    form = {"customerId": customerId, "amount": amount, "status": status}
    return _action_response(create_invoice(form, LogContext("CREATE_INVOICE")))


@router.post("/dashboard/invoices/{invoice_id}/edit")
def api_invoice_update(
    invoice_id: str,
    customerId: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
):
    form = {"customerId": customerId, "amount": amount, "status": status}
    return _action_response(update_invoice(invoice_id, form, LogContext("UPDATE_INVOICE")))


@router.post("/dashboard/invoices/{invoice_id}/delete")
def api_invoice_delete(invoice_id: str):
    return _action_response(delete_invoice(invoice_id, LogContext("DELETE_INVOICE")))
