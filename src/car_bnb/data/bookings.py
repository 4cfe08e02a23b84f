"""
MongoEngine Document representing a single reservation (booking) of a listing.

Bookings live in their own 'bookings' collection rather than embedded in the
listing, so owner and renter dashboards can query them directly by ownerId or
renterId without going through the listing.
"""
import datetime
import mongoengine

"""
A single reservation of a listing by a renter.

    Fields:
        confirmation_code: Short human reference, two letters and four digits (e.g. 'QK4821').
        listing_id: Id of the booked Listing.
        owner_id: The listing's owner at the time of booking. This is a point-in-time
                  copy kept for owner-scoped queries, not a live reference.
        renter_id: Id of the user who made the booking.
        start_date / end_date: Rental window as opaque date strings (yyyy-mm-dd from the CLI).

    Notes:
    - A booking has no status. It is active from creation until it is deleted.
    - Nothing orders start/end or checks overlap with other bookings of the same listing.
"""
class Booking(mongoengine.Document):
    # When the booking was made.
    booked_date = mongoengine.DateTimeField(default=datetime.datetime.now)

    confirmation_code = mongoengine.StringField(required=True, db_field='confirmationCode')  # Not checked for collisions.

    listing_id = mongoengine.StringField(required=True, db_field='listingId')
    owner_id = mongoengine.StringField(required=True, db_field='ownerId')  # Copied from the listing at booking time.
    renter_id = mongoengine.StringField(required=True, db_field='renterId')

    start_date = mongoengine.StringField(required=True, db_field='startDate')  # Opaque strings; no ordering enforced.
    end_date = mongoengine.StringField(required=True, db_field='endDate')

    meta = {
        'db_alias': 'core',  # Must match the alias registered in mongo_setup.
        'collection': 'bookings',
        'indexes': ['owner_id', 'renter_id'],  # Owner and renter dashboards.
    }

    @property
    def date_range(self):
        return f'{self.start_date} -> {self.end_date}'
