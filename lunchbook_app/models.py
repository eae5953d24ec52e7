"""
Customers and reservations, with their queries and save logic.

Every persistence method takes the sqlite connection as its first argument;
nothing here holds a global handle.
"""

import datetime
import logging
import sqlite3
from dataclasses import dataclass, field
from typing import Optional

from .config import DEFAULT_TOP_LIMIT
from .db import execute, query
from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


CUSTOMER_COLUMNS = """
    customers.id AS "id",
    first_name AS "firstName",
    last_name AS "lastName",
    phone,
    customers.notes AS "notes"
"""

RESERVATION_COLUMNS = """
    id,
    customer_id AS "customerId",
    num_guests AS "numGuests",
    start_at AS "startAt",
    notes
"""


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def _parse_start_at(value) -> datetime.datetime:
    """Naive datetime for storage. Offset-aware values are converted to UTC."""
    if isinstance(value, str) and value:
        try:
            value = datetime.datetime.fromisoformat(value)
        except ValueError:
            raise ValidationError(f"Invalid start time: {value!r}. Use ISO 8601 format.")
    if not isinstance(value, datetime.datetime):
        raise ValidationError("Reservation start time is required")
    if value.tzinfo is not None:
        value = value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return value


@dataclass
class Customer:
    first_name: str
    last_name: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    _id: Optional[int] = field(default=None, init=False)

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Customer":
        customer = cls(
            first_name=row["firstName"],
            last_name=row["lastName"],
            phone=row["phone"],
            notes=row["notes"]
        )
        customer._id = row["id"]
        return customer

    @property
    def id(self) -> Optional[int]:
        """Set by the store on first save; None while transient."""
        return self._id

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @classmethod
    def all(cls, conn: sqlite3.Connection) -> list["Customer"]:
        """Every customer, by last name then first name."""
        rows = query(conn, f"""
            SELECT {CUSTOMER_COLUMNS}
            FROM customers
            ORDER BY last_name, first_name
        """)
        return [cls.from_row(row) for row in rows]

    @classmethod
    def get(cls, conn: sqlite3.Connection, customer_id: int) -> "Customer":
        """Look up one customer, raising NotFoundError when missing."""
        rows = query(conn, f"""
            SELECT {CUSTOMER_COLUMNS}
            FROM customers
            WHERE id = ?
        """, (customer_id,))
        if not rows:
            raise NotFoundError(f"No such customer: {customer_id}")
        return cls.from_row(rows[0])

    @classmethod
    def search(cls, conn: sqlite3.Connection, term: str) -> list["Customer"]:
        """Customers whose first or last name contains term, ignoring case.

        An empty term matches everybody.
        """
        pattern = f"%{term}%"
        rows = query(conn, f"""
            SELECT {CUSTOMER_COLUMNS}
            FROM customers
            WHERE LOWER(first_name) LIKE LOWER(?) OR LOWER(last_name) LIKE LOWER(?)
            ORDER BY last_name, first_name
        """, (pattern, pattern))
        return [cls.from_row(row) for row in rows]

    @classmethod
    def top(cls, conn: sqlite3.Connection, limit: int = DEFAULT_TOP_LIMIT) -> list["Customer"]:
        """Best customers by number of reservations, most first.

        Customers without any reservation never show up, since the ranking
        joins through the reservations table.
        """
        if limit < 1:
            raise ValidationError("Limit must be at least 1")
        rows = query(conn, f"""
            SELECT {CUSTOMER_COLUMNS}, COUNT(*) AS "reservationCount"
            FROM reservations
            JOIN customers ON reservations.customer_id = customers.id
            GROUP BY customers.id, first_name, last_name, phone, customers.notes
            ORDER BY COUNT(*) DESC, customers.id
            LIMIT ?
        """, (limit,))
        return [cls.from_row(row) for row in rows]

    def get_reservations(self, conn: sqlite3.Connection) -> list["Reservation"]:
        return Reservation.for_customer(conn, self.id)

    def get_most_recent_reservation(self, conn: sqlite3.Connection) -> "Reservation":
        """The reservation with the latest start time for this customer."""
        rows = query(conn, f"""
            SELECT {RESERVATION_COLUMNS}
            FROM reservations
            WHERE customer_id = ?
            ORDER BY start_at DESC, id DESC
            LIMIT 1
        """, (self.id,))
        if not rows:
            raise NotFoundError(f"No reservations for customer: {self.id}")
        return Reservation.from_row(rows[0])

    def save(self, conn: sqlite3.Connection) -> None:
        """Insert on first save, update every field by id afterwards."""
        if self.id is None:
            cursor = execute(conn, """
                INSERT INTO customers (first_name, last_name, phone, notes)
                VALUES (?, ?, ?, ?)
            """, (self.first_name, self.last_name, self.phone, self.notes))
            self._id = cursor.lastrowid
            logger.info(f"Created customer {self.id}")
        else:
            execute(conn, """
                UPDATE customers
                SET first_name = ?, last_name = ?, phone = ?, notes = ?
                WHERE id = ?
            """, (self.first_name, self.last_name, self.phone, self.notes, self.id))
            logger.info(f"Updated customer {self.id}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "phone": self.phone,
            "notes": self.notes
        }


class Reservation:
    """A booked party for one customer.

    customer_id is fixed at construction. num_guests must stay >= 1 and notes
    is never None.
    """

    def __init__(
        self,
        customer_id: int,
        num_guests: int,
        start_at,
        notes: Optional[str] = ""
    ):
        self._id = None
        self._customer_id = customer_id
        self.num_guests = num_guests
        self.start_at = start_at
        self.notes = notes

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Reservation":
        reservation = cls(
            customer_id=row["customerId"],
            num_guests=row["numGuests"],
            start_at=row["startAt"],
            notes=row["notes"]
        )
        reservation._id = row["id"]
        return reservation

    @property
    def id(self) -> Optional[int]:
        return self._id

    @property
    def customer_id(self) -> int:
        return self._customer_id

    @property
    def num_guests(self) -> int:
        return self._num_guests

    @num_guests.setter
    def num_guests(self, num: int) -> None:
        if not isinstance(num, int) or isinstance(num, bool):
            raise ValidationError(f"Number of guests must be a whole number, got {num!r}")
        if num < 1:
            raise ValidationError("Number of guests must be at least 1")
        self._num_guests = num

    @property
    def start_at(self) -> datetime.datetime:
        return self._start_at

    @start_at.setter
    def start_at(self, value) -> None:
        self._start_at = _parse_start_at(value)

    @property
    def notes(self) -> str:
        return self._notes

    @notes.setter
    def notes(self, value: Optional[str]) -> None:
        self._notes = value or ""

    def formatted_start_at(self) -> str:
        """e.g. 'January 5th 2026, 7:30 pm'"""
        start = self.start_at
        hour = start.hour % 12 or 12
        meridiem = "am" if start.hour < 12 else "pm"
        return f"{start:%B} {_ordinal(start.day)} {start:%Y}, {hour}:{start:%M} {meridiem}"

    @classmethod
    def get(cls, conn: sqlite3.Connection, reservation_id: int) -> "Reservation":
        """Look up one reservation, raising NotFoundError when missing."""
        rows = query(conn, f"""
            SELECT {RESERVATION_COLUMNS}
            FROM reservations
            WHERE id = ?
        """, (reservation_id,))
        if not rows:
            raise NotFoundError(f"No such reservation: {reservation_id}")
        return cls.from_row(rows[0])

    @classmethod
    def for_customer(cls, conn: sqlite3.Connection, customer_id: int) -> list["Reservation"]:
        """All reservations for a customer; empty list if there are none."""
        rows = query(conn, f"""
            SELECT {RESERVATION_COLUMNS}
            FROM reservations
            WHERE customer_id = ?
            ORDER BY start_at, id
        """, (customer_id,))
        return [cls.from_row(row) for row in rows]

    def save(self, conn: sqlite3.Connection) -> None:
        """Insert on first save. Updates leave customer_id alone."""
        if self.id is None:
            cursor = execute(conn, """
                INSERT INTO reservations (customer_id, start_at, num_guests, notes)
                VALUES (?, ?, ?, ?)
            """, (self.customer_id, self.start_at.isoformat(), self.num_guests, self.notes))
            self._id = cursor.lastrowid
            logger.info(f"Created reservation {self.id} for customer {self.customer_id}")
        else:
            execute(conn, """
                UPDATE reservations
                SET start_at = ?, num_guests = ?, notes = ?
                WHERE id = ?
            """, (self.start_at.isoformat(), self.num_guests, self.notes, self.id))
            logger.info(f"Updated reservation {self.id}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "num_guests": self.num_guests,
            "start_at": self.start_at.isoformat(),
            "formatted_start_at": self.formatted_start_at(),
            "notes": self.notes
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, Reservation):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (
            f"Reservation(id={self.id!r}, customer_id={self.customer_id!r}, "
            f"num_guests={self.num_guests!r}, start_at={self.start_at!r}, notes={self.notes!r})"
        )
