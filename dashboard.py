# dashboard.py
import asyncio
import logging
import math
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select
from starlette.concurrency import run_in_threadpool

from db import DataFetchError, Database
from models import (
  CardData, Customer, CustomerName, Invoice, InvoiceDetail, LatestInvoice,
  Revenue, RevenueChart, RevenuePoint,
)

logger = logging.getLogger(__name__)


def format_currency(amount: int) -> str:
  """Minor units to a dollar string, e.g. 123456 -> "$1,234.56"."""
  sign = "-" if amount < 0 else ""
  return f"{sign}${abs(amount) / 100:,.2f}"


def fetch_revenue(session: Session) -> List[Revenue]:
  try:
    return list(session.exec(select(Revenue)).all())
  except SQLAlchemyError as exc:
    logger.exception("Database Error: revenue")
    raise DataFetchError("Failed to fetch revenue data") from exc


def y_axis(revenue: Sequence[Revenue]) -> Tuple[List[str], int]:
  if not revenue:
    return [], 0
  highest = max(r.revenue for r in revenue)
  top_label = math.ceil(highest / 1000) * 1000
  labels = [f"${i // 1000}K" for i in range(top_label, -1, -1000)]
  return labels, top_label


def revenue_chart(revenue: Sequence[Revenue]) -> RevenueChart:
  labels, top_label = y_axis(revenue)
  return RevenueChart(
    revenue=[RevenuePoint(month=r.month, revenue=r.revenue) for r in revenue],
    y_axis_labels=labels,
    top_label=top_label,
  )


def fetch_latest_invoices(session: Session, limit: int = 5) -> List[LatestInvoice]:
  try:
    rows = session.exec(
      select(Invoice, Customer)
      .join(Customer, Invoice.customer_id == Customer.id)
      .order_by(Invoice.date.desc())
      .limit(limit)
    ).all()
  except SQLAlchemyError as exc:
    logger.exception("Database Error: latest invoices")
    raise DataFetchError("Failed to fetch the latest invoices") from exc

  return [
    LatestInvoice(
      id=inv.id,
      amount=format_currency(inv.amount),
      name=c.name,
      email=c.email,
      image_url=c.image_url,
    )
    for inv, c in rows
  ]


def _scalar(database: Database, statement):
  with database.session() as session:
    return session.exec(statement).one()


def _sum_by_status(status: str):
  return select(func.coalesce(func.sum(Invoice.amount), 0)).where(Invoice.status == status)


async def fetch_card_data(database: Database) -> CardData:
  # independent aggregate reads, one session each
  try:
    invoice_count, customer_count, paid, pending = await asyncio.gather(
      run_in_threadpool(_scalar, database, select(func.count()).select_from(Invoice)),
      run_in_threadpool(_scalar, database, select(func.count()).select_from(Customer)),
      run_in_threadpool(_scalar, database, _sum_by_status("paid")),
      run_in_threadpool(_scalar, database, _sum_by_status("pending")),
    )
  except SQLAlchemyError as exc:
    logger.exception("Database Error: card data")
    raise DataFetchError("Failed to fetch card data") from exc

  return CardData(
    number_of_customers=customer_count,
    number_of_invoices=invoice_count,
    total_paid_invoices=format_currency(paid or 0),
    total_pending_invoices=format_currency(pending or 0),
  )


def fetch_invoice_by_id(session: Session, invoice_id: str) -> Optional[InvoiceDetail]:
  try:
    inv = session.get(Invoice, invoice_id)
  except SQLAlchemyError as exc:
    logger.exception("Database Error: invoice %s", invoice_id)
    raise DataFetchError("Failed to fetch invoice") from exc
  if not inv:
    return None

  return InvoiceDetail(
    id=inv.id,
    customer_id=inv.customer_id,
    amount=inv.amount / 100,
    status=inv.status,
    date=inv.date,
  )


def fetch_customer_names(session: Session) -> List[CustomerName]:
  try:
    rows = session.exec(select(Customer.id, Customer.name).order_by(Customer.name.asc())).all()
  except SQLAlchemyError as exc:
    logger.exception("Database Error: customer names")
    raise DataFetchError("Failed to fetch all customers") from exc
  return [CustomerName(id=cid, name=name) for cid, name in rows]
