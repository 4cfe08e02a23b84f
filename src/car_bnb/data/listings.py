"""
MongoEngine model representing a car listed for rent.

Stored field names follow the shared 'listings' schema (camelCase); Python
attribute names are snake_case and mapped with db_field.
"""

import datetime
import mongoengine

"""
Listing document stored in the 'listings' collection of the 'core' database alias.

Fields:
        brand, model, color, license_plate: Vehicle description (required).
        cost: Price per day. Never negative.
        city, address: Where the car is picked up. City is matched exactly on search.
        image_url: URI of the car picture.
        created_by_uid: Id of the owning user. Set once at creation, never reassigned.
        latitude, longitude: Geocoded from "<address>, <city>" at creation time.
        is_booked: Availability flag, False on creation.

Listings are create-and-read only: there is no edit or delete path.
"""
class Listing(mongoengine.Document):
    # Creation time; the callable is evaluated per document.
    registered_date = mongoengine.DateTimeField(default=datetime.datetime.now)

    brand = mongoengine.StringField(required=True)
    model = mongoengine.StringField(required=True)
    color = mongoengine.StringField(required=True)
    license_plate = mongoengine.StringField(required=True, db_field='licensePlate')  # Free text, not checked for uniqueness.
    cost = mongoengine.FloatField(required=True, min_value=0)  # Price per day.

    city = mongoengine.StringField(required=True)  # Exact-match search key.
    address = mongoengine.StringField(required=True)
    image_url = mongoengine.StringField(required=True, db_field='imageUrl')

    created_by_uid = mongoengine.StringField(required=True, db_field='createdByUID')  # Owning User id as a string.

    latitude = mongoengine.FloatField(required=True)
    longitude = mongoengine.FloatField(required=True)

    is_booked = mongoengine.BooleanField(default=False, db_field='isBooked')  # Written once, never flipped.

    meta = {
        'db_alias': 'core',  # Must match the alias registered in mongo_setup.
        'collection': 'listings',
        'indexes': ['created_by_uid', 'city'],  # Dashboard and search lookups.
    }

    @property
    def title(self):
        return f'{self.brand} {self.model}'

    """
    Short price badge shown next to search results, e.g. '$45'. Cents are truncated.
    """
    @property
    def price_badge(self):
        return f'${int(self.cost)}'
