"""
Invoice form schema shared by the create and update actions.

Field names follow the HTML form (`customerId`, `amount`, `status`); the
snake_case attribute names are accepted too so JSON callers and tests can use
either spelling.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .money import to_minor_units

INVOICE_STATUSES = ("pending", "paid")

FIELD_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}

# invoices.amount is a SQLite INTEGER: signed 64-bit
MAX_AMOUNT_CENTS = 2**63 - 1

_ATTR_TO_FIELD = {"customer_id": "customerId", "amount": "amount", "status": "status"}


class InvoiceForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    customer_id: str = Field(alias="customerId", min_length=1)
    amount: float = Field(gt=0, allow_inf_nan=False)
    status: Literal["pending", "paid"]

    @field_validator("amount")
    @classmethod
    def amount_in_cents_range(cls, v: float) -> float:
        # range check before Decimal: quantize past 28 digits raises InvalidOperation
        if v * 100 > MAX_AMOUNT_CENTS or to_minor_units(v) > MAX_AMOUNT_CENTS:
            raise ValueError("Please enter a smaller amount.")
        if to_minor_units(v) < 1:
            raise ValueError(FIELD_MESSAGES["amount"])
        return v


def _form_field(loc: tuple) -> Optional[str]:
    if not loc:
        return None
    name = str(loc[0])
    return _ATTR_TO_FIELD.get(name, name)


def flatten_errors(exc: ValidationError) -> Dict[str, List[str]]:
    """Collapse pydantic errors into {form_field: [message, ...]}.

    Type and constraint failures (missing, wrong type, <= 0) map to the
    field's message; our own validators keep the message they raised.
    """
    out: Dict[str, List[str]] = {}
    for err in exc.errors():
        field = _form_field(err.get("loc", ()))
        if field is None:
            continue
        raised = (err.get("ctx") or {}).get("error") if err.get("type") == "value_error" else None
        msg = str(raised) if raised else FIELD_MESSAGES.get(field, err.get("msg", "Invalid value."))
        msgs = out.setdefault(field, [])
        if msg not in msgs:
            msgs.append(msg)
    return out


def validate_invoice_form(raw: Mapping[str, Any]) -> Tuple[Optional[InvoiceForm], Dict[str, List[str]]]:
    """Validate submitted form fields without raising.

    Returns (form, {}) on success, (None, field_errors) on failure.
    """
    data = {
        "customerId": raw.get("customerId", raw.get("customer_id")),
        "amount": raw.get("amount"),
        "status": raw.get("status"),
    }
    try:
        return InvoiceForm.model_validate(data), {}
    except ValidationError as e:
        return None, flatten_errors(e)
