import datetime

import pytest

from lunchbook_app.db import init_db
from lunchbook_app.models import Customer, Reservation


@pytest.fixture
def conn():
    connection = init_db(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def make_customer(conn):
    def _make(first_name="Ana", last_name="Diaz", phone=None, notes=None):
        customer = Customer(first_name=first_name, last_name=last_name, phone=phone, notes=notes)
        customer.save(conn)
        return customer
    return _make


@pytest.fixture
def make_reservation(conn):
    def _make(customer, start_at=datetime.datetime(2026, 1, 5, 19, 30), num_guests=2, notes=""):
        reservation = Reservation(
            customer_id=customer.id,
            num_guests=num_guests,
            start_at=start_at,
            notes=notes
        )
        reservation.save(conn)
        return reservation
    return _make
