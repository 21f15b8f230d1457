"""
Settings Service - the shop details printed on invoices.

Stored details win; until they are saved the BUSINESS_* environment
variables are used.
"""
import logging
import os
from typing import Optional

from sqlalchemy.orm import Session

from models import BusinessSettings

logger = logging.getLogger(__name__)


def clean_gstin(value: Optional[str]) -> Optional[str]:
     value = (value or "").strip().upper()
     return value or None


class SettingsService:
     """Service class for business settings."""

     @staticmethod
     def defaults() -> dict:
          return {
               "name": os.getenv("BUSINESS_NAME", "GemsAccurate Inc."),
               "address": os.getenv("BUSINESS_ADDRESS", ""),
               "phone": os.getenv("BUSINESS_PHONE", ""),
               "gstin": clean_gstin(os.getenv("BUSINESS_GSTIN")),
          }

     @staticmethod
     def get_business_details(db: Session) -> dict:
          row = db.get(BusinessSettings, BusinessSettings.SINGLETON_ID)
          if row is None:
               return SettingsService.defaults()
          return {
               "name": row.name,
               "address": row.address,
               "phone": row.phone,
               "gstin": row.gstin,
          }

     @staticmethod
     def update_business_details(db: Session, data) -> dict:
          """
          Save the shop details, creating the settings row on first use.

          Args:
               db: SQLAlchemy database session
               data: BusinessSettingsUpdate payload

          Returns:
               The saved details
          """
          row = db.get(BusinessSettings, BusinessSettings.SINGLETON_ID)
          if row is None:
               row = BusinessSettings(id=BusinessSettings.SINGLETON_ID)
               db.add(row)
          row.name = data.name.strip()
          row.address = data.address.strip()
          row.phone = data.phone.strip()
          row.gstin = clean_gstin(data.gstin)
          db.flush()

          logger.info("Business details updated: %s", row.name)
          return SettingsService.get_business_details(db)
