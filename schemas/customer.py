"""
Pydantic schemas for Customer API request/response validation.
"""
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict


class CustomerCreate(BaseModel):
     """Schema for creating a customer."""
     name: str = Field(..., min_length=1, max_length=150)
     father_name: Optional[str] = Field(None, max_length=150)
     business_name: Optional[str] = Field(None, max_length=200)
     address: Optional[str] = Field(None, max_length=500)
     phone: Optional[str] = Field(None, max_length=20)
     gstin: Optional[str] = Field(None, max_length=15, description="GST identification number; blank for cash-memo customers")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Rohan Sharma",
                    "father_name": "Mahesh Sharma",
                    "address": "123 Diamond Street, Jaipur",
                    "phone": "9876543210",
                    "gstin": "08AAAAA0000A1Z5"
               }
          }
     )


class CustomerUpdate(BaseModel):
     """Schema for updating a customer. Only provided fields change."""
     name: Optional[str] = Field(None, min_length=1, max_length=150)
     father_name: Optional[str] = Field(None, max_length=150)
     business_name: Optional[str] = Field(None, max_length=200)
     address: Optional[str] = Field(None, max_length=500)
     phone: Optional[str] = Field(None, max_length=20)
     gstin: Optional[str] = Field(None, max_length=15)


class CustomerResponse(BaseModel):
     id: int
     name: str
     father_name: Optional[str] = None
     business_name: Optional[str] = None
     address: Optional[str] = None
     phone: Optional[str] = None
     gstin: Optional[str] = None
     has_tax_id: bool
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class CustomerListResponse(BaseModel):
     customers: List[CustomerResponse]
     total: int
