from fastapi import APIRouter

from ..services.customer_svc import list_customers

router = APIRouter()


@router.get("/dashboard/customers")
def api_customers():
    return {"items": list_customers()}
