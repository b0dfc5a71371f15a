"""Pydantic request/response schemas for the Billing API.

These are external contracts, separate from internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ProcessInvoiceRequest(BaseModel):
    request_id: str
    invoice_id: str
    invoice_type: str
    user_id: str
    location_id: str
    month_str: str
    amount: float = Field(ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "request_id": "req-2024-05-001",
                    "invoice_id": "inv-001",
                    "invoice_type": "SUBSCRIPTION",
                    "user_id": "user-001",
                    "location_id": "loc-001",
                    "month_str": "2024-05",
                    "amount": 49.90,
                }
            ]
        }
    }


class InvoicePaymentResponse(BaseModel):
    invoice_payment_id: str
    invoice_id: str
    invoice_state: str
    transaction_id: str | None = None
    message: str | None = None


class InvoiceStatusResponse(BaseModel):
    invoice_id: str
    invoice_type: str
    invoice_state: str
    transaction_id: str | None = None
    request_id: str | None = None
    attempts: int = 0
    updated_at: datetime | None = None
