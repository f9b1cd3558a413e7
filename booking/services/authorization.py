"""
authorization.py
----------------
Ownership check for booking changes. Who the acting user is comes from the
session (request.user); this module only compares identities.
"""

from ..exceptions import Denied


def authorize(acting_user_id, booking) -> None:
    if acting_user_id is None or str(booking.user_id) != str(acting_user_id):
        raise Denied()


class BookingAuthorizer:
    def authorize(self, acting_user_id, booking) -> None:
        authorize(acting_user_id, booking)
