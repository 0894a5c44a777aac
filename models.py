# models.py
import uuid
from typing import List, Optional
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship


def _uuid() -> str:
  return str(uuid.uuid4())


def as_utc(value: datetime) -> datetime:
  """Naive values are taken to be UTC already; aware ones are converted."""
  if value.tzinfo is None:
    return value.replace(tzinfo=timezone.utc)
  return value.astimezone(timezone.utc)


class Customer(SQLModel, table=True):
  __tablename__ = "customers"

  id: str = Field(default_factory=_uuid, primary_key=True, index=True)
  name: str = Field(index=True)
  email: str
  image_url: str = ""
  company: Optional[str] = None
  status: Optional[str] = None  # active|inactive
  total_orders: Optional[int] = None
  total_spent: Optional[int] = None  # minor units
  last_order_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

  invoices: List["Invoice"] = Relationship(back_populates="customer")


class Invoice(SQLModel, table=True):
  __tablename__ = "invoices"

  id: str = Field(default_factory=_uuid, primary_key=True, index=True)
  customer_id: str = Field(foreign_key="customers.id", index=True)
  amount: int  # minor units
  status: str = "pending"  # pending|paid
  date: datetime = Field(index=True, sa_type=DateTime(timezone=True))  # UTC

  customer: Optional[Customer] = Relationship(back_populates="invoices")


class Revenue(SQLModel, table=True):
  __tablename__ = "revenue"

  month: str = Field(primary_key=True)
  revenue: int


class User(SQLModel, table=True):
  __tablename__ = "users"

  id: str = Field(default_factory=_uuid, primary_key=True)
  name: str
  email: str = Field(unique=True, index=True)
  password: str  # bcrypt hash


# ---- response shapes ----

class CustomerRow(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  id: str
  name: str
  email: str
  company: str = ""
  status: str = "inactive"
  total_orders: int = PydanticField(0, alias="totalOrders")
  total_spent: int = PydanticField(0, alias="totalSpent")
  last_order_date: Optional[datetime] = PydanticField(None, alias="lastOrderDate")
  image_url: str = ""

  @classmethod
  def from_customer(cls, c: Customer) -> "CustomerRow":
    return cls(
      id=c.id,
      name=c.name,
      email=c.email,
      company=c.company or "",
      status=c.status or "inactive",
      total_orders=c.total_orders or 0,
      total_spent=c.total_spent or 0,
      last_order_date=c.last_order_date,
      image_url=c.image_url,
    )


class CustomerPageOut(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  customers: List[CustomerRow]
  total_pages: int = PydanticField(alias="totalPages")


class InvoiceRow(BaseModel):
  id: str
  amount: int
  date: datetime
  status: str
  customer_id: str
  name: str
  email: str
  image_url: str

  @classmethod
  def from_pair(cls, inv: Invoice, c: Customer) -> "InvoiceRow":
    return cls(
      id=inv.id,
      amount=inv.amount,
      date=inv.date,
      status=inv.status,
      customer_id=inv.customer_id,
      name=c.name,
      email=c.email,
      image_url=c.image_url,
    )


class InvoicePageOut(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  invoices: List[InvoiceRow]
  total_pages: int = PydanticField(alias="totalPages")


class LatestInvoice(BaseModel):
  id: str
  amount: str  # formatted, e.g. "$1,234.56"
  name: str
  email: str
  image_url: str


class InvoiceDetail(BaseModel):
  id: str
  customer_id: str
  amount: float  # major units
  status: str
  date: datetime


class CustomerName(BaseModel):
  id: str
  name: str


class CardData(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  number_of_customers: int = PydanticField(alias="numberOfCustomers")
  number_of_invoices: int = PydanticField(alias="numberOfInvoices")
  total_paid_invoices: str = PydanticField(alias="totalPaidInvoices")
  total_pending_invoices: str = PydanticField(alias="totalPendingInvoices")


class RevenuePoint(BaseModel):
  month: str
  revenue: int


class RevenueChart(BaseModel):
  model_config = ConfigDict(populate_by_name=True)

  revenue: List[RevenuePoint]
  y_axis_labels: List[str] = PydanticField(alias="yAxisLabels")
  top_label: int = PydanticField(alias="topLabel")
