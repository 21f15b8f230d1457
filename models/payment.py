"""
Payment models - one recorded payment from a customer and its split across
that customer's invoices.

The split is validated before it is written (see services.allocation); the
database stores whatever passed validation, as a single payment row plus its
allocation rows.
"""
from datetime import date

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import relationship
from .base import Base


class Payment(Base):
     __tablename__ = "payments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     customer_id = Column(
          Integer,
          ForeignKey("customers.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     amount = Column(Numeric(14, 2), nullable=False)
     payment_date = Column(Date, default=date.today, nullable=False, index=True)
     payment_method = Column(String(20), nullable=False, default="Cash")
     notes = Column(String(500), nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     customer = relationship("Customer", back_populates="payments")
     allocations = relationship(
          "PaymentAllocation",
          back_populates="payment",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Payment(id={self.id}, customer_id={self.customer_id}, amount={self.amount})>"


class PaymentAllocation(Base):
     __tablename__ = "payment_allocations"

     id = Column(Integer, primary_key=True, autoincrement=True)
     payment_id = Column(
          Integer,
          ForeignKey("payments.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     invoice_id = Column(
          String(20),
          ForeignKey("invoices.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )
     principal = Column(Numeric(14, 2), nullable=False, default=0)
     interest = Column(Numeric(14, 2), nullable=False, default=0)

     payment = relationship("Payment", back_populates="allocations")
     invoice = relationship("Invoice", back_populates="allocations")

     def __repr__(self):
          return (
               f"<PaymentAllocation(payment_id={self.payment_id}, invoice_id='{self.invoice_id}', "
               f"principal={self.principal}, interest={self.interest})>"
          )
