from models import SEAT_REGULAR, SEAT_VIP, Seat, db
from repositories.base import commit, remove, save


def seat_type_for_row(row_number, rows):
    # The last two rows of a hall are VIP
    if rows >= 2 and row_number >= rows - 1:
        return SEAT_VIP
    return SEAT_REGULAR


class SeatRepo:

    def create(self, seat):
        return save(seat)

    def get_by_id(self, seat_id):
        return db.session.get(Seat, seat_id)

    def get_all(self):
        return Seat.query.order_by(Seat.id.asc()).all()

    def get_by_hall_id(self, hall_id):
        return (
            Seat.query.filter_by(hall_id=hall_id)
            .order_by(Seat.row_number.asc(), Seat.seat_number.asc())
            .all()
        )

    def update(self, seat):
        commit()
        return seat

    def delete(self, seat_id):
        seat = self.get_by_id(seat_id)
        if seat is None:
            return False
        remove(seat)
        return True

    def count_by_hall_id(self, hall_id):
        return Seat.query.filter_by(hall_id=hall_id).count()

    def ensure_seats_for_hall(self, hall):
        """Create the seat grid of a hall unless it already has seats.

        Returns the number of seats created.
        """
        if self.count_by_hall_id(hall.id) > 0:
            return 0

        created = 0
        for row in range(1, hall.rows + 1):
            for number in range(1, hall.seats_per_row + 1):
                db.session.add(
                    Seat(
                        hall_id=hall.id,
                        row_number=row,
                        seat_number=number,
                        seat_type=seat_type_for_row(row, hall.rows),
                    )
                )
                created += 1
        commit()
        return created

    def fix_vip_seats_for_hall(self, hall):
        """Re-apply the last-two-rows VIP rule to existing seats."""
        if hall.rows < 2:
            return
        vip_from = hall.rows - 1
        Seat.query.filter(Seat.hall_id == hall.id, Seat.row_number >= vip_from).update(
            {Seat.seat_type: SEAT_VIP}, synchronize_session=False
        )
        Seat.query.filter(Seat.hall_id == hall.id, Seat.row_number < vip_from).update(
            {Seat.seat_type: SEAT_REGULAR}, synchronize_session=False
        )
        commit()
