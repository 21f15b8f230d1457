from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class Customer(Base):
     """
     Customer model - the party an invoice is issued to.

     A customer with a GSTIN receives tax invoices (INV-...); everyone else
     receives cash memos (CSH-...) that never carry GST.
     """
     __tablename__ = "customers"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(150), nullable=False, index=True)
     father_name = Column(String(150), nullable=True)
     business_name = Column(String(200), nullable=True)
     address = Column(String(500), nullable=True)
     phone = Column(String(20), nullable=True)
     gstin = Column(String(15), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     invoices = relationship("Invoice", back_populates="customer")
     payments = relationship("Payment", back_populates="customer")

     def __repr__(self):
          return f"<Customer(id={self.id}, name='{self.name}', gstin='{self.gstin or ''}')>"

     @property
     def has_tax_id(self) -> bool:
          return bool(self.gstin and self.gstin.strip())
