from models import ACTIVE_STATUSES, Booking, Ticket, db
from repositories.base import commit, remove, save


class BookingRepo:

    def create(self, booking):
        return save(booking)

    def get_by_id(self, booking_id):
        return db.session.get(Booking, booking_id)

    def get_all(self):
        return Booking.query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()

    def get_by_user_id(self, user_id):
        return (
            Booking.query.filter_by(user_id=user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
            .all()
        )

    def get_by_session_id(self, session_id):
        """Bookings of a session that still hold their seats."""
        return Booking.query.filter(
            Booking.session_id == session_id,
            Booking.status.in_(ACTIVE_STATUSES),
        ).all()

    def update(self, booking):
        commit()
        return booking

    def update_status(self, booking_id, status):
        booking = self.get_by_id(booking_id)
        if booking is None:
            return None
        booking.status = status
        commit()
        return booking

    def update_tickets(self, booking_id, tickets, total_price):
        booking = self.get_by_id(booking_id)
        if booking is None:
            return None
        booking.tickets = list(tickets)
        booking.total_price = total_price
        commit()
        return booking

    def delete(self, booking_id):
        booking = self.get_by_id(booking_id)
        if booking is None:
            return False
        remove(booking)
        return True

    def delete_by_user_id(self, user_id):
        bookings = Booking.query.filter_by(user_id=user_id).all()
        for booking in bookings:
            db.session.delete(booking)
        commit()
        return len(bookings)

    def booked_seat_ids_for_session(self, session_id):
        """Seat ids held by pending or confirmed bookings, in first-seen order."""
        rows = (
            db.session.query(Ticket.seat_id)
            .join(Booking, Ticket.booking_id == Booking.id)
            .filter(
                Booking.session_id == session_id,
                Booking.status.in_(ACTIVE_STATUSES),
            )
            .order_by(Ticket.id.asc())
            .all()
        )
        seat_ids = []
        seen = set()
        for (seat_id,) in rows:
            if seat_id not in seen:
                seen.add(seat_id)
                seat_ids.append(seat_id)
        return seat_ids
