# seed.py
import logging
from datetime import datetime, timezone
from typing import Dict

import bcrypt
from sqlmodel import Session, select

from models import Customer, Invoice, Revenue, User, as_utc

logger = logging.getLogger(__name__)

USERS = [
  {
    "id": "410544b2-4001-4271-9855-fec4b6a6442a",
    "name": "User",
    "email": "user@nextmail.com",
    "password": "123456",
  },
]

CUSTOMERS = [
  {
    "id": "d6e15727-9fe1-4961-8c5b-ea44a9bd81aa",
    "name": "Evil Rabbit",
    "email": "evil@rabbit.com",
    "image_url": "/customers/evil-rabbit.png",
    "company": "Rabbit Hole Ltd",
    "status": "active",
    "total_orders": 12,
    "total_spent": 1257890,
    "last_order_date": datetime(2024, 3, 1, tzinfo=timezone.utc),
  },
  {
    "id": "3958dc9e-712f-4377-85e9-fec4b6a6442a",
    "name": "Delba de Oliveira",
    "email": "delba@oliveira.com",
    "image_url": "/customers/delba-de-oliveira.png",
    "company": "Oliveira Design",
    "status": "active",
    "total_orders": 8,
    "total_spent": 845600,
    "last_order_date": datetime(2024, 2, 15, tzinfo=timezone.utc),
  },
  {
    "id": "3958dc9e-742f-4377-85e9-fec4b6a6442a",
    "name": "Lee Robinson",
    "email": "lee@robinson.com",
    "image_url": "/customers/lee-robinson.png",
    "company": "Robinson Labs",
    "status": "inactive",
    "total_orders": 3,
    "total_spent": 120000,
    "last_order_date": datetime(2023, 11, 20, tzinfo=timezone.utc),
  },
  {
    "id": "76d65c26-f784-44a2-ac19-586678f7c2f2",
    "name": "Michael Novotny",
    "email": "michael@novotny.com",
    "image_url": "/customers/michael-novotny.png",
    "company": None,
    "status": "active",
    "total_orders": 5,
    "total_spent": 302000,
    "last_order_date": datetime(2024, 1, 9, tzinfo=timezone.utc),
  },
  {
    "id": "CC27C14A-0ACF-4F4A-A6C9-D45682C144B9",
    "name": "Amy Burns",
    "email": "amy@burns.com",
    "image_url": "/customers/amy-burns.png",
    "company": "Burns & Co",
    "status": "inactive",
    "total_orders": 0,
    "total_spent": 0,
    "last_order_date": None,
  },
  {
    "id": "13D07535-C59E-4157-A011-F8D2EF4E0CBB",
    "name": "Balazs Orban",
    "email": "balazs@orban.com",
    "image_url": "/customers/balazs-orban.png",
    "company": "Orban Studio",
    "status": None,
    "total_orders": None,
    "total_spent": None,
    "last_order_date": None,
  },
]

INVOICES = [
  {"customer_id": CUSTOMERS[0]["id"], "amount": 15795, "status": "pending", "date": "2022-12-06"},
  {"customer_id": CUSTOMERS[1]["id"], "amount": 20348, "status": "pending", "date": "2022-11-14"},
  {"customer_id": CUSTOMERS[4]["id"], "amount": 3040, "status": "paid", "date": "2022-10-29"},
  {"customer_id": CUSTOMERS[3]["id"], "amount": 44800, "status": "paid", "date": "2023-09-10"},
  {"customer_id": CUSTOMERS[5]["id"], "amount": 34577, "status": "pending", "date": "2023-08-05"},
  {"customer_id": CUSTOMERS[2]["id"], "amount": 54246, "status": "pending", "date": "2023-07-16"},
  {"customer_id": CUSTOMERS[0]["id"], "amount": 666, "status": "pending", "date": "2023-06-27"},
  {"customer_id": CUSTOMERS[3]["id"], "amount": 32545, "status": "paid", "date": "2023-06-09"},
  {"customer_id": CUSTOMERS[4]["id"], "amount": 1250, "status": "paid", "date": "2023-06-17"},
  {"customer_id": CUSTOMERS[5]["id"], "amount": 8546, "status": "paid", "date": "2023-06-07"},
  {"customer_id": CUSTOMERS[1]["id"], "amount": 500, "status": "paid", "date": "2023-08-19"},
  {"customer_id": CUSTOMERS[5]["id"], "amount": 8945, "status": "paid", "date": "2023-06-03"},
  {"customer_id": CUSTOMERS[2]["id"], "amount": 1000, "status": "paid", "date": "2022-06-05"},
]

REVENUE = [
  {"month": "Jan", "revenue": 2000},
  {"month": "Feb", "revenue": 1800},
  {"month": "Mar", "revenue": 2200},
  {"month": "Apr", "revenue": 2500},
  {"month": "May", "revenue": 2300},
  {"month": "Jun", "revenue": 3200},
  {"month": "Jul", "revenue": 3500},
  {"month": "Aug", "revenue": 3700},
  {"month": "Sep", "revenue": 2500},
  {"month": "Oct", "revenue": 2800},
  {"month": "Nov", "revenue": 3000},
  {"month": "Dec", "revenue": 4800},
]


def hash_password(password: str) -> str:
  return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def check_password(password: str, hashed: str) -> bool:
  return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))


def seed_database(session: Session) -> Dict[str, int]:
  """Upsert users, customers and revenue; invoices only go in when there are none."""
  for u in USERS:
    session.merge(User(id=u["id"], name=u["name"], email=u["email"], password=hash_password(u["password"])))

  for c in CUSTOMERS:
    session.merge(Customer(**c))

  for r in REVENUE:
    session.merge(Revenue(**r))

  # invoices have generated ids, so re-seeding would duplicate them
  invoices_added = 0
  if session.exec(select(Invoice)).first() is None:
    session.add_all([
      Invoice(
        customer_id=i["customer_id"],
        amount=i["amount"],
        status=i["status"],
        date=as_utc(datetime.fromisoformat(i["date"])),
      )
      for i in INVOICES
    ])
    invoices_added = len(INVOICES)

  session.commit()
  logger.info("Seeded %d users, %d customers, %d invoices, %d revenue rows",
              len(USERS), len(CUSTOMERS), invoices_added, len(REVENUE))

  return {
    "users": len(USERS),
    "customers": len(CUSTOMERS),
    "invoices": invoices_added,
    "revenue": len(REVENUE),
  }
