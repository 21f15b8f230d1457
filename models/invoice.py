from sqlalchemy import (
     Boolean, Column, Date, DateTime, ForeignKey, Integer, Numeric, String, func,
)
from sqlalchemy.orm import relationship
from .base import Base


class Invoice(Base):
     """
     Invoice model - a priced bill issued to a customer.

     Totals are computed once at issuance (and again on a full edit) and
     stored; `total` is the principal that interest accrues on once the due
     date passes. What is still owed is never stored, it is derived from the
     payment allocations on every read.
     """
     __tablename__ = "invoices"

     id = Column(String(20), primary_key=True)  # e.g. INV-240700001

     customer_id = Column(
          Integer,
          ForeignKey("customers.id", ondelete="RESTRICT"),
          nullable=False,
          index=True
     )

     issue_date = Column(Date, nullable=False, index=True)
     due_date = Column(Date, nullable=False, index=True)
     payment_mode = Column(String(20), nullable=False, default="Cash")

     # Totals
     subtotal = Column(Numeric(14, 2), nullable=False)
     cgst = Column(Numeric(14, 2), nullable=False, default=0)
     sgst = Column(Numeric(14, 2), nullable=False, default=0)
     discount = Column(Numeric(14, 2), nullable=False, default=0)
     total = Column(Numeric(14, 2), nullable=False)

     # Interest terms
     interest_rate = Column(Numeric(6, 3), nullable=False, default=0)
     interest_compound = Column(String(20), nullable=False, default="Monthly")

     is_deleted = Column(Boolean, nullable=False, default=False, index=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     customer = relationship("Customer", back_populates="invoices")
     line_items = relationship(
          "InvoiceLineItem",
          back_populates="invoice",
          order_by="InvoiceLineItem.position",
          cascade="all, delete-orphan"
     )
     allocations = relationship("PaymentAllocation", back_populates="invoice")

     def __repr__(self):
          return f"<Invoice(id='{self.id}', total={self.total}, due_date={self.due_date}, deleted={self.is_deleted})>"

     @property
     def is_tax_invoice(self) -> bool:
          return self.customer is not None and self.customer.has_tax_id

     def soft_delete(self) -> None:
          self.is_deleted = True

     def recover(self) -> None:
          self.is_deleted = False


class InvoiceLineItem(Base):
     """One jewelry line on an invoice, in display order."""
     __tablename__ = "invoice_line_items"

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_id = Column(
          String(20),
          ForeignKey("invoices.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     position = Column(Integer, nullable=False, default=0)

     item_name = Column(String(200), nullable=False)
     hsn = Column(String(20), nullable=True)
     purity = Column(String(20), nullable=True)
     quantity = Column(Integer, nullable=False, default=1)
     gross_weight = Column(Numeric(12, 3), nullable=False, default=0)
     net_weight = Column(Numeric(12, 3), nullable=False, default=0)
     rate = Column(Numeric(14, 2), nullable=False, default=0)
     making_charge_type = Column(String(20), nullable=False, default="flat")
     making_charge_value = Column(Numeric(14, 2), nullable=False, default=0)
     apply_tax = Column(Boolean, nullable=False, default=True)
     amount = Column(Numeric(14, 2), nullable=False, default=0)

     invoice = relationship("Invoice", back_populates="line_items")

     def __repr__(self):
          return f"<InvoiceLineItem(invoice_id='{self.invoice_id}', item='{self.item_name}', amount={self.amount})>"
