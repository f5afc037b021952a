"""Seat allocation and pricing for bookings.

Availability is checked by scanning the seat ids already held by pending or
confirmed bookings of the session. Nothing locks those seats between the
check and the insert.
"""
import logging

from models import SEAT_VIP, STATUS_CANCELLED, STATUS_CONFIRMED, Booking, Ticket, utcnow
from repositories.booking_repo import BookingRepo
from repositories.seat_repo import SeatRepo
from repositories.session_repo import SessionRepo
from services.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

ADULT_PRICE = 2500
VIP_PRICE_MULTIPLIER = 2
TICKET_TYPE_PRICES = {"adult": 2500, "student": 1900, "child": 1600}

SEATS_REQUIRED = "at least one seat required"
SESSION_NOT_FOUND = "session not found"
BOOKING_NOT_FOUND = "booking not found"
SEAT_ALREADY_BOOKED = "seat already booked"
INVALID_SEAT = "invalid seat"
BOOKING_CANCELLED = "cannot change seats for cancelled booking"


def vip_price():
    return ADULT_PRICE * VIP_PRICE_MULTIPLIER


def ticket_type_price(ticket_type):
    return TICKET_TYPE_PRICES.get(ticket_type, TICKET_TYPE_PRICES["adult"])


def seat_price(seat, session, ticket_type=None):
    """Price a single seat.

    VIP seats always cost the VIP price. Otherwise a ticket type, when given,
    selects from the ticket-type table and the session price applies when not.
    """
    if seat.seat_type == SEAT_VIP:
        return vip_price()
    if ticket_type is not None:
        return ticket_type_price(ticket_type)
    return session.price


class BookingService:

    def __init__(self, booking_repo=None, session_repo=None, seat_repo=None):
        self.booking_repo = booking_repo or BookingRepo()
        self.session_repo = session_repo or SessionRepo()
        self.seat_repo = seat_repo or SeatRepo()

    def get_by_id(self, booking_id):
        return self.booking_repo.get_by_id(booking_id)

    def get_by_user_id(self, user_id):
        return self.booking_repo.get_by_user_id(user_id)

    def get_all(self):
        return self.booking_repo.get_all()

    def _allocate(self, session, seat_ids, taken, ticket_types=None):
        """Validate the requested seats against `taken` and price each one.

        `taken` is updated as seats are claimed, so a seat listed twice in the
        same request is rejected as already booked.
        """
        tickets = []
        total_price = 0.0
        for index, seat_id in enumerate(seat_ids):
            if seat_id in taken:
                logger.warning("Seat %s already booked for session %s", seat_id, session.id)
                raise BadRequestError(SEAT_ALREADY_BOOKED)
            seat = self.seat_repo.get_by_id(seat_id)
            if seat is None or seat.hall_id != session.hall_id:
                logger.warning("Seat %s is not part of hall %s", seat_id, session.hall_id)
                raise BadRequestError(INVALID_SEAT)

            ticket_type = ticket_types[index] if ticket_types is not None else None
            price = seat_price(seat, session, ticket_type)
            tickets.append(Ticket(seat_id=seat_id, price=price))
            total_price += price
            taken.add(seat_id)
        return tickets, total_price

    def create(self, user_id, session_id, seat_ids, ticket_types=None):
        if not seat_ids:
            raise BadRequestError(SEATS_REQUIRED)
        session = self.session_repo.get_by_id(session_id)
        if session is None:
            raise BadRequestError(SESSION_NOT_FOUND)

        taken = set(self.booking_repo.booked_seat_ids_for_session(session_id))
        # Ticket types only apply when there is one per seat
        if ticket_types is None or len(ticket_types) != len(seat_ids):
            ticket_types = None
        tickets, total_price = self._allocate(session, seat_ids, taken, ticket_types)

        booking = Booking(
            user_id=user_id,
            session_id=session_id,
            status=STATUS_CONFIRMED,
            total_price=total_price,
            created_at=utcnow(),
            tickets=tickets,
        )
        self.booking_repo.create(booking)
        logger.info(
            "Booking %s created for user %s: session %s, %d seat(s), total %.2f",
            booking.id, user_id, session_id, len(tickets), total_price,
        )
        return booking

    def cancel(self, booking_id):
        booking = self.booking_repo.update_status(booking_id, STATUS_CANCELLED)
        if booking is None:
            raise NotFoundError(BOOKING_NOT_FOUND)
        logger.info("Booking %s cancelled", booking_id)
        return booking

    def change_seats(self, booking_id, new_seat_ids):
        if not new_seat_ids:
            raise BadRequestError(SEATS_REQUIRED)
        booking = self.booking_repo.get_by_id(booking_id)
        if booking is None:
            raise NotFoundError(BOOKING_NOT_FOUND)
        if booking.status == STATUS_CANCELLED:
            raise BadRequestError(BOOKING_CANCELLED)
        session = self.session_repo.get_by_id(booking.session_id)
        if session is None:
            raise NotFoundError(SESSION_NOT_FOUND)

        current = {ticket.seat_id for ticket in booking.tickets}
        taken = {
            seat_id
            for seat_id in self.booking_repo.booked_seat_ids_for_session(booking.session_id)
            if seat_id not in current
        }
        tickets, total_price = self._allocate(session, new_seat_ids, taken)

        self.booking_repo.update_tickets(booking_id, tickets, total_price)
        logger.info(
            "Booking %s moved to seats %s, total %.2f", booking_id, list(new_seat_ids), total_price
        )
        return booking
