# tests/test_dashboard.py
import asyncio

import pytest

from dashboard import (
  fetch_card_data, fetch_customer_names, fetch_invoice_by_id,
  fetch_latest_invoices, fetch_revenue, format_currency, revenue_chart, y_axis,
)
from models import Revenue


@pytest.mark.parametrize("amount, expected", [
  (0, "$0.00"),
  (666, "$6.66"),
  (123456, "$1,234.56"),
  (-150, "-$1.50"),
])
def test_format_currency(amount, expected):
  assert format_currency(amount) == expected


def test_y_axis_rounds_up_to_next_thousand():
  labels, top = y_axis([Revenue(month="Jan", revenue=2000), Revenue(month="Dec", revenue=4800)])
  assert top == 5000
  assert labels == ["$5K", "$4K", "$3K", "$2K", "$1K", "$0K"]


def test_y_axis_empty():
  assert y_axis([]) == ([], 0)


def test_revenue_chart(session):
  session.add_all([Revenue(month="Jan", revenue=2000), Revenue(month="Feb", revenue=1800)])
  session.commit()

  chart = revenue_chart(fetch_revenue(session))
  assert {p.month for p in chart.revenue} == {"Jan", "Feb"}
  assert chart.top_label == 2000
  assert chart.y_axis_labels == ["$2K", "$1K", "$0K"]


def test_latest_invoices_are_newest_five(session, invoices):
  latest = fetch_latest_invoices(session)
  assert len(latest) == 5
  assert {latest[0].id, latest[1].id} == {"inv-01", "inv-02"}
  assert latest[2].id == "inv-03"
  assert latest[2].amount == "$30.40"
  assert latest[2].name == "Customer 02"


def test_card_data_runs_aggregates(database, invoices):
  cards = asyncio.run(fetch_card_data(database))
  assert cards.number_of_invoices == 8
  assert cards.number_of_customers == 12
  assert cards.total_paid_invoices == format_currency(555 + 3040 + 44800 + 32545)
  assert cards.total_pending_invoices == format_currency(15795 + 34577 + 54246 + 666)


def test_card_data_on_empty_tables(database):
  cards = asyncio.run(fetch_card_data(database))
  assert cards.number_of_invoices == 0
  assert cards.total_paid_invoices == "$0.00"


def test_invoice_by_id_in_major_units(session, invoices):
  inv = fetch_invoice_by_id(session, "inv-03")
  assert inv.amount == 30.40
  assert inv.customer_id == "cust-02"
  assert fetch_invoice_by_id(session, "missing") is None


def test_customer_names_sorted(session, customers):
  names = fetch_customer_names(session)
  assert [n.name for n in names] == sorted(c.name for c in customers)
  assert names[0].id == "cust-00"
