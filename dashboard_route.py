# dashboard_route.py
import logging
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from db import Database, get_database, get_session
from models import (
  CardData, CustomerName, CustomerPageOut, InvoiceDetail, InvoiceRow,
  LatestInvoice, RevenueChart,
)
import dashboard
import listing
from pagination import generate_pagination
from seed import seed_database

logger = logging.getLogger(__name__)

SESSION_COOKIE = os.getenv("SESSION_COOKIE", "session").strip() or "session"

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/customers", response_model=CustomerPageOut)
def list_customers(
  query: Optional[str] = None,
  page: Optional[str] = None,
  status: Optional[str] = None,
  sort: Optional[str] = None,
  direction: Optional[str] = None,
  session: Session = Depends(get_session),
):
  req = listing.PageRequest.for_customers(query, page, status, sort, direction)
  return listing.list_customers(session, req)


@router.get("/customers/names", response_model=List[CustomerName])
def list_customer_names(session: Session = Depends(get_session)):
  return dashboard.fetch_customer_names(session)


@router.get("/invoices", response_model=List[InvoiceRow])
def list_invoices(
  query: Optional[str] = None,
  page: Optional[str] = None,
  status: Optional[str] = None,
  sort: Optional[str] = None,
  direction: Optional[str] = None,
  session: Session = Depends(get_session),
):
  req = listing.PageRequest.for_invoices(query, page, status, sort, direction)
  return listing.list_invoices(session, req).invoices


@router.get("/invoices/pages")
def invoice_pages(query: Optional[str] = None, status: Optional[str] = None, session: Session = Depends(get_session)):
  return {"totalPages": listing.count_invoice_pages(session, query, status)}


@router.get("/invoices/latest", response_model=List[LatestInvoice])
def latest_invoices(session: Session = Depends(get_session)):
  return dashboard.fetch_latest_invoices(session)


@router.get("/invoices/{invoice_id}", response_model=InvoiceDetail)
def get_invoice(invoice_id: str, session: Session = Depends(get_session)):
  inv = dashboard.fetch_invoice_by_id(session, invoice_id)
  if not inv:
    raise HTTPException(status_code=404, detail="Invoice not found")
  return inv


@router.get("/revenue", response_model=RevenueChart)
def revenue(session: Session = Depends(get_session)):
  return dashboard.revenue_chart(dashboard.fetch_revenue(session))


@router.get("/cards", response_model=CardData)
async def cards(database: Database = Depends(get_database)):
  return await dashboard.fetch_card_data(database)


@router.get("/pagination")
def pagination(
  current_page: Optional[str] = Query(None, alias="currentPage"),
  total_pages: Optional[str] = Query(None, alias="totalPages"),
):
  try:
    total = max(int(float(total_pages)), 0)
  except (TypeError, ValueError, OverflowError):
    total = 0
  return {"pages": generate_pagination(listing.coerce_page(current_page), total)}


@router.get("/auth/check")
def auth_check(request: Request):
  # authorization is disabled; this only reports whether a session cookie exists
  return {"isLoggedIn": bool(request.cookies.get(SESSION_COOKIE))}


@router.post("/seed")
def seed(session: Session = Depends(get_session)):
  try:
    counts = seed_database(session)
  except SQLAlchemyError:
    session.rollback()
    logger.exception("Database Error: seeding failed")
    raise HTTPException(status_code=500, detail="Failed to seed database")
  return {"ok": True, "seeded": counts}
