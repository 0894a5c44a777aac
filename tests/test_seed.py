# tests/test_seed.py
from sqlmodel import select

from models import Customer, Invoice, Revenue, User
from seed import CUSTOMERS, INVOICES, REVENUE, check_password, seed_database


def test_seed_populates_every_table(session):
  counts = seed_database(session)
  assert counts == {"users": 1, "customers": len(CUSTOMERS), "invoices": len(INVOICES), "revenue": len(REVENUE)}

  assert len(session.exec(select(Customer)).all()) == len(CUSTOMERS)
  assert len(session.exec(select(Invoice)).all()) == len(INVOICES)
  assert len(session.exec(select(Revenue)).all()) == 12


def test_reseeding_does_not_duplicate_invoices(session):
  seed_database(session)
  counts = seed_database(session)
  assert counts["invoices"] == 0
  assert len(session.exec(select(Invoice)).all()) == len(INVOICES)
  assert len(session.exec(select(User)).all()) == 1


def test_passwords_are_hashed(session):
  seed_database(session)
  user = session.exec(select(User)).one()
  assert user.password != "123456"
  assert check_password("123456", user.password)
  assert not check_password("wrong", user.password)
