from sqlalchemy import Column, Integer, String, DateTime, func
from .base import Base


class BusinessSettings(Base):
     """
     Shop details printed on every invoice.

     A single row (id 1). Until a Developer saves it, invoices fall back to
     the BUSINESS_* environment variables.
     """
     __tablename__ = "business_settings"

     SINGLETON_ID = 1

     id = Column(Integer, primary_key=True)
     name = Column(String(200), nullable=False)
     address = Column(String(500), nullable=False)
     phone = Column(String(20), nullable=False)
     gstin = Column(String(15), nullable=True)
     updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)

     def __repr__(self):
          return f"<BusinessSettings(name='{self.name}', gstin='{self.gstin or ''}')>"
