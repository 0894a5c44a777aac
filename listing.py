# listing.py
"""Filtered, sorted and paginated listings for customers and invoices.

A listing is driven by a PageRequest. The free-text query is matched as a
case-insensitive substring against a fixed set of text columns; when the
trimmed query also reads as a number or a date, equality against the amount
or date column is OR-ed in. The status filter is AND-ed on top. The same
predicate feeds both the row slice and the page count.
"""
import logging
import math
import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from db import DataFetchError
from models import (
  Customer, CustomerPageOut, CustomerRow, Invoice, InvoicePageOut, InvoiceRow, as_utc,
)

logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 6
ALL_STATUSES = "all"

# bound parameters must fit a signed 64-bit integer
MAX_SQL_INT = 2 ** 63 - 1
MAX_PAGE = MAX_SQL_INT // ITEMS_PER_PAGE


class SortDirection(str, Enum):
  asc = "asc"
  desc = "desc"


class CustomerSortField(str, Enum):
  name = "name"
  email = "email"
  company = "company"
  status = "status"
  total_orders = "total_orders"
  total_spent = "total_spent"
  last_order_date = "last_order_date"


class InvoiceSortField(str, Enum):
  date = "date"
  amount = "amount"
  status = "status"
  name = "name"
  email = "email"


# keys used by the dashboard tables
CUSTOMER_SORT_ALIASES = {
  "totalOrders": "total_orders",
  "totalSpent": "total_spent",
  "lastOrderDate": "last_order_date",
}

CUSTOMER_SORT_COLUMNS = {
  CustomerSortField.name: Customer.name,
  CustomerSortField.email: Customer.email,
  CustomerSortField.company: Customer.company,
  CustomerSortField.status: Customer.status,
  CustomerSortField.total_orders: Customer.total_orders,
  CustomerSortField.total_spent: Customer.total_spent,
  CustomerSortField.last_order_date: Customer.last_order_date,
}

INVOICE_SORT_COLUMNS = {
  InvoiceSortField.date: Invoice.date,
  InvoiceSortField.amount: Invoice.amount,
  InvoiceSortField.status: Invoice.status,
  InvoiceSortField.name: Customer.name,
  InvoiceSortField.email: Customer.email,
}


def coerce_page(raw: Any) -> int:
  """Absent, zero, negative or non-numeric pages become page 1.

  Pages past MAX_PAGE are clamped to it; such a page is simply empty.
  """
  try:
    value = float(str(raw).strip())
  except (TypeError, ValueError):
    return 1
  if math.isnan(value) or value < 1:
    return 1
  if value >= MAX_PAGE:
    return MAX_PAGE
  return int(value)


def _pick(enum_cls: Type[Enum], raw: Optional[str], default: Enum, aliases: Optional[Dict[str, str]] = None):
  key = (raw or "").strip()
  key = (aliases or {}).get(key, key)
  for candidate in (key, key.lower()):
    try:
      return enum_cls(candidate)
    except ValueError:
      continue
  return default


def _status(raw: Optional[str]) -> str:
  value = (raw or "").strip()
  if not value or value.lower() == ALL_STATUSES:
    return ALL_STATUSES
  return value


class PageRequest(BaseModel):
  model_config = ConfigDict(frozen=True)

  query: str = ""
  page: int = Field(1, ge=1, le=MAX_PAGE)
  status: str = ALL_STATUSES
  sort: Union[CustomerSortField, InvoiceSortField] = CustomerSortField.name
  direction: SortDirection = SortDirection.asc

  @property
  def offset(self) -> int:
    return (self.page - 1) * ITEMS_PER_PAGE

  @classmethod
  def for_customers(cls, query=None, page=None, status=None, sort=None, direction=None) -> "PageRequest":
    return cls(
      query=query or "",
      page=coerce_page(page),
      status=_status(status),
      sort=_pick(CustomerSortField, sort, CustomerSortField.name, CUSTOMER_SORT_ALIASES),
      direction=_pick(SortDirection, direction, SortDirection.asc),
    )

  @classmethod
  def for_invoices(cls, query=None, page=None, status=None, sort=None, direction=None) -> "PageRequest":
    return cls(
      query=query or "",
      page=coerce_page(page),
      status=_status(status),
      sort=_pick(InvoiceSortField, sort, InvoiceSortField.date),
      direction=_pick(SortDirection, direction, SortDirection.desc),
    )


# plain decimal or exponent notation; no hex, underscores or inf/nan
_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

_DATE_FORMATS = (
  "%m/%d/%Y",
  "%Y/%m/%d",
  "%b %d, %Y",
  "%B %d, %Y",
  "%d %b %Y",
  "%d %B %Y",
)


def parse_amount(query: Optional[str]) -> Optional[Union[int, float]]:
  text = (query or "").strip()
  if not _NUMBER_RE.match(text):
    return None
  value = float(text)
  if not math.isfinite(value) or abs(value) > MAX_SQL_INT:
    return None
  return int(value) if value.is_integer() else value


def parse_date(query: Optional[str]) -> Optional[datetime]:
  text = (query or "").strip()
  if not text or not re.search(r"[0-9]", text):
    return None

  parsed = None
  try:
    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
  except ValueError:
    for fmt in _DATE_FORMATS:
      try:
        parsed = datetime.strptime(text, fmt)
        break
      except ValueError:
        continue
  if parsed is None:
    return None

  return as_utc(parsed)


def _status_clause(column, status: str):
  if status == ALL_STATUSES:
    return None
  return func.lower(column) == status.lower()


def customer_predicate(query: Optional[str], status: str = ALL_STATUSES) -> list:
  """WHERE clauses (implicitly AND-ed) for the customers listing."""
  clauses = []
  text = (query or "").strip()
  if text:
    clauses.append(or_(
      Customer.name.icontains(text, autoescape=True),
      Customer.email.icontains(text, autoescape=True),
      Customer.company.icontains(text, autoescape=True),
    ))

  status_clause = _status_clause(Customer.status, status)
  if status_clause is not None:
    clauses.append(status_clause)
  return clauses


def invoice_predicate(query: Optional[str], status: str = ALL_STATUSES) -> list:
  """WHERE clauses for invoices joined to their customer."""
  clauses = []
  branches = []
  text = (query or "").strip()
  if text:
    branches.extend([
      Customer.name.icontains(text, autoescape=True),
      Customer.email.icontains(text, autoescape=True),
      Invoice.status.icontains(text, autoescape=True),
    ])

  amount = parse_amount(text)
  if amount is not None:
    branches.append(Invoice.amount == amount)

  day = parse_date(text)
  if day is not None:
    branches.append(Invoice.date == day)

  if branches:
    clauses.append(or_(*branches))

  status_clause = _status_clause(Invoice.status, status)
  if status_clause is not None:
    clauses.append(status_clause)
  return clauses


def total_pages(count: int) -> int:
  return math.ceil(count / ITEMS_PER_PAGE)


def _ordering(column, tiebreak, direction: SortDirection) -> list:
  if direction == SortDirection.desc:
    return [column.desc(), tiebreak.desc()]
  return [column.asc(), tiebreak.asc()]


def list_customers(session: Session, request: PageRequest) -> CustomerPageOut:
  predicate = customer_predicate(request.query, request.status)
  column = CUSTOMER_SORT_COLUMNS[request.sort]

  try:
    count = session.exec(
      select(func.count()).select_from(Customer).where(*predicate)
    ).one()
    rows = session.exec(
      select(Customer)
      .where(*predicate)
      .order_by(*_ordering(column, Customer.id, request.direction))
      .offset(request.offset)
      .limit(ITEMS_PER_PAGE)
    ).all()
  except SQLAlchemyError as exc:
    logger.exception("Database Error: listing customers failed")
    raise DataFetchError("Failed to fetch customers") from exc

  return CustomerPageOut(
    customers=[CustomerRow.from_customer(c) for c in rows],
    total_pages=total_pages(count),
  )


def _count_invoices(session: Session, predicate: list) -> int:
  return session.exec(
    select(func.count())
    .select_from(Invoice)
    .join(Customer, Invoice.customer_id == Customer.id)
    .where(*predicate)
  ).one()


def list_invoices(session: Session, request: PageRequest) -> InvoicePageOut:
  predicate = invoice_predicate(request.query, request.status)
  column = INVOICE_SORT_COLUMNS[request.sort]

  try:
    count = _count_invoices(session, predicate)
    rows = session.exec(
      select(Invoice, Customer)
      .join(Customer, Invoice.customer_id == Customer.id)
      .where(*predicate)
      .order_by(*_ordering(column, Invoice.id, request.direction))
      .offset(request.offset)
      .limit(ITEMS_PER_PAGE)
    ).all()
  except SQLAlchemyError as exc:
    logger.exception("Database Error: listing invoices failed")
    raise DataFetchError("Failed to fetch invoices") from exc

  return InvoicePageOut(
    invoices=[InvoiceRow.from_pair(inv, c) for inv, c in rows],
    total_pages=total_pages(count),
  )


def count_invoice_pages(session: Session, query: Optional[str], status: Optional[str] = None) -> int:
  predicate = invoice_predicate(query, _status(status))
  try:
    count = _count_invoices(session, predicate)
  except SQLAlchemyError as exc:
    logger.exception("Database Error: counting invoices failed")
    raise DataFetchError("Failed to fetch total number of invoices") from exc
  return total_pages(count)
