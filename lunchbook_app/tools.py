"""
Operation functions and name registry for Lunchbook.
Each function takes the connection first and returns JSON-ready data, so the
request layer never touches models directly.
"""

import logging
import sqlite3
from typing import Optional

from .config import DEFAULT_TOP_LIMIT
from .errors import LunchbookError
from .models import Customer, Reservation

logger = logging.getLogger(__name__)


def _error(e: LunchbookError) -> dict:
    return {"error": str(e), "status": e.status}


# --- Customers ---

def list_customers(conn: sqlite3.Connection) -> list[dict]:
    """Everybody, by last name."""
    return [c.to_dict() for c in Customer.all(conn)]


def search_customers(conn: sqlite3.Connection, term: str) -> list[dict]:
    """Find customers by part of their first or last name."""
    results = [c.to_dict() for c in Customer.search(conn, (term or "").strip())]
    return results if results else [{"message": f"No customers matching '{term}'."}]


def top_customers(conn: sqlite3.Connection, limit: int = DEFAULT_TOP_LIMIT) -> list[dict]:
    """Customers with the most reservations."""
    try:
        results = [c.to_dict() for c in Customer.top(conn, limit)]
    except LunchbookError as e:
        return [_error(e)]
    return results if results else [{"message": "No reservations have been made yet."}]


def get_customer(conn: sqlite3.Connection, customer_id: int) -> dict:
    """One customer plus their reservations."""
    try:
        customer = Customer.get(conn, customer_id)
    except LunchbookError as e:
        return _error(e)
    result = customer.to_dict()
    result["reservations"] = [r.to_dict() for r in customer.get_reservations(conn)]
    return result


def add_customer(
    conn: sqlite3.Connection,
    first_name: str,
    last_name: str,
    phone: Optional[str] = None,
    notes: Optional[str] = None
) -> dict:
    """Create a customer."""
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    if not first_name or not last_name:
        return {"error": "First and last name are required", "status": 400}

    customer = Customer(
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        notes=notes
    )
    customer.save(conn)
    return {
        "success": True,
        "customer": customer.to_dict(),
        "message": f"Added {customer.full_name}. Customer ID is {customer.id}."
    }


def edit_customer(
    conn: sqlite3.Connection,
    customer_id: int,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
    phone: Optional[str] = None,
    notes: Optional[str] = None
) -> dict:
    """Change any of a customer's fields. None leaves a field as it is."""
    try:
        customer = Customer.get(conn, customer_id)
    except LunchbookError as e:
        return _error(e)

    customer.first_name = first_name or customer.first_name
    customer.last_name = last_name or customer.last_name
    if phone is not None:
        customer.phone = phone
    if notes is not None:
        customer.notes = notes
    customer.save(conn)
    return {
        "success": True,
        "customer": customer.to_dict(),
        "message": "Customer successfully updated."
    }


def most_recent_reservation(conn: sqlite3.Connection, customer_id: int) -> dict:
    """Latest reservation for a customer."""
    try:
        customer = Customer.get(conn, customer_id)
        return customer.get_most_recent_reservation(conn).to_dict()
    except LunchbookError as e:
        return _error(e)


# --- Reservations ---

def get_reservation(conn: sqlite3.Connection, reservation_id: int) -> dict:
    try:
        return Reservation.get(conn, reservation_id).to_dict()
    except LunchbookError as e:
        return _error(e)


def add_reservation(
    conn: sqlite3.Connection,
    customer_id: int,
    start_at: str,
    num_guests: int,
    notes: Optional[str] = None
) -> dict:
    """Book a table for an existing customer."""
    try:
        customer = Customer.get(conn, customer_id)
        reservation = Reservation(
            customer_id=customer.id,
            num_guests=num_guests,
            start_at=start_at,
            notes=notes
        )
    except LunchbookError as e:
        return _error(e)

    reservation.save(conn)
    return {
        "success": True,
        "reservation": reservation.to_dict(),
        "message": (
            f"Reservation for {customer.full_name} on {reservation.formatted_start_at()} confirmed. "
            f"Reservation ID is {reservation.id}."
        )
    }


def edit_reservation(
    conn: sqlite3.Connection,
    reservation_id: int,
    new_start_at: Optional[str] = None,
    new_num_guests: Optional[int] = None,
    new_notes: Optional[str] = None
) -> dict:
    """Change time, party size or notes on an existing reservation."""
    try:
        reservation = Reservation.get(conn, reservation_id)
        if new_start_at is not None:
            reservation.start_at = new_start_at
        if new_num_guests is not None:
            reservation.num_guests = new_num_guests
        if new_notes is not None:
            reservation.notes = new_notes
    except LunchbookError as e:
        return _error(e)

    reservation.save(conn)
    return {
        "success": True,
        "reservation": reservation.to_dict(),
        "message": "Reservation successfully modified."
    }


# Map operation names to functions

TOOL_FUNCTIONS = {
    "list_customers": lambda conn, args: list_customers(conn),
    "search_customers": lambda conn, args: search_customers(
        conn,
        args.get("term", "")
    ),
    "top_customers": lambda conn, args: top_customers(
        conn,
        args.get("limit", DEFAULT_TOP_LIMIT)
    ),
    "get_customer": lambda conn, args: get_customer(
        conn,
        args.get("customer_id", 0)
    ),
    "add_customer": lambda conn, args: add_customer(
        conn,
        args.get("first_name", ""),
        args.get("last_name", ""),
        args.get("phone"),
        args.get("notes")
    ),
    "edit_customer": lambda conn, args: edit_customer(
        conn,
        args.get("customer_id", 0),
        args.get("first_name"),
        args.get("last_name"),
        args.get("phone"),
        args.get("notes")
    ),
    "most_recent_reservation": lambda conn, args: most_recent_reservation(
        conn,
        args.get("customer_id", 0)
    ),
    "get_reservation": lambda conn, args: get_reservation(
        conn,
        args.get("reservation_id", 0)
    ),
    "add_reservation": lambda conn, args: add_reservation(
        conn,
        args.get("customer_id", 0),
        args.get("start_at", ""),
        args.get("num_guests", 1),
        args.get("notes")
    ),
    "edit_reservation": lambda conn, args: edit_reservation(
        conn,
        args.get("reservation_id", 0),
        args.get("new_start_at"),
        args.get("new_num_guests"),
        args.get("new_notes")
    )
}


def run_tool(conn: sqlite3.Connection, name: str, args: dict):
    """Run an operation by name. Store errors are not caught here."""
    if name not in TOOL_FUNCTIONS:
        logger.warning(f"Unknown tool requested: {name}")
        return {"error": f"Unknown tool: {name}", "status": 400}
    logger.debug(f"Running tool {name} with {args}")
    return TOOL_FUNCTIONS[name](conn, args or {})
