"""
Pydantic schemas for business settings.
"""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class BusinessSettingsUpdate(BaseModel):
     """Shop details printed on invoices; only Developers may change them."""
     name: str = Field(..., min_length=1, max_length=200)
     address: str = Field(..., min_length=1, max_length=500)
     phone: str = Field(..., min_length=10, max_length=20)
     gstin: Optional[str] = Field(None, max_length=15)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "GemsAccurate Inc.",
                    "address": "12 Johari Bazaar, Jaipur",
                    "phone": "9876543210",
                    "gstin": "08ABCDE1234F1Z5"
               }
          }
     )
