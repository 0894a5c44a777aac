# tests/conftest.py
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from db import Database
from main import create_app
from models import Customer, Invoice

UTC = timezone.utc


@pytest.fixture
def database(tmp_path):
  db = Database(f"sqlite:///{tmp_path / 'dashboard-test.db'}")
  db.create_all()
  yield db
  db.dispose()


@pytest.fixture
def session(database):
  with database.session() as s:
    yield s


@pytest.fixture
def client(database):
  with TestClient(create_app(database)) as c:
    yield c


@pytest.fixture
def customers(session):
  """Twelve customers: 00-07 active, 08-11 inactive, even ones work at Acme."""
  rows = []
  for i in range(12):
    rows.append(Customer(
      id=f"cust-{i:02d}",
      name=f"Customer {i:02d}",
      email=f"c{i:02d}@example.com",
      image_url=f"/customers/{i:02d}.png",
      company="Acme Corp" if i % 2 == 0 else None,
      status="active" if i < 8 else "inactive",
      total_orders=i,
      total_spent=i * 1000,
    ))
  session.add_all(rows)
  session.commit()
  return rows


@pytest.fixture
def invoices(session, customers):
  rows = [
    Invoice(id="inv-01", customer_id="cust-00", amount=15795, status="pending", date=datetime(2024, 3, 1, tzinfo=UTC)),
    Invoice(id="inv-02", customer_id="cust-01", amount=555, status="paid", date=datetime(2024, 3, 1, tzinfo=UTC)),
    Invoice(id="inv-03", customer_id="cust-02", amount=3040, status="paid", date=datetime(2024, 2, 14, tzinfo=UTC)),
    Invoice(id="inv-04", customer_id="cust-03", amount=44800, status="paid", date=datetime(2023, 9, 10, tzinfo=UTC)),
    Invoice(id="inv-05", customer_id="cust-04", amount=34577, status="pending", date=datetime(2023, 8, 5, tzinfo=UTC)),
    Invoice(id="inv-06", customer_id="cust-05", amount=54246, status="pending", date=datetime(2023, 7, 16, tzinfo=UTC)),
    Invoice(id="inv-07", customer_id="cust-06", amount=666, status="pending", date=datetime(2023, 6, 27, tzinfo=UTC)),
    Invoice(id="inv-08", customer_id="cust-07", amount=32545, status="paid", date=datetime(2023, 6, 9, tzinfo=UTC)),
  ]
  session.add_all(rows)
  session.commit()
  return rows
