"""
MongoEngine Document representing a user profile.

A user is either an owner (lists cars) or a renter (books them). The document id
is the user's stable identifier; listings and bookings refer to it as a plain
string. The bcrypt password hash lives on the same record because the identity
provider in services.identity keeps its credentials in this collection.
"""
import datetime
import mongoengine

"""
User document stored in the 'users' collection (db alias: 'core').

Fields:
    first_name / last_name: Display name parts (required).
    email: Sign-in email, stored trimmed and lower-cased (unique).
    is_owner: Role flag chosen at sign-up. True routes to the owner flow.
    password_hash: bcrypt hash of the password. Never the password itself.
"""
class User(mongoengine.Document):
    # Sign-up time.
    registered_date = mongoengine.DateTimeField(default=datetime.datetime.now)

    first_name = mongoengine.StringField(required=True, db_field='firstName')
    last_name = mongoengine.StringField(required=True, db_field='lastName')
    email = mongoengine.StringField(required=True, unique=True)  # Unique index; duplicates raise NotUniqueError on save.
    is_owner = mongoengine.BooleanField(default=False, db_field='isOwner')  # Unset reads as a renter.

    password_hash = mongoengine.StringField(required=True, db_field='passwordHash')

    meta = {
        'db_alias': 'core',  # Must match the alias registered in mongo_setup.
        'collection': 'users'
    }

    @property
    def full_name(self):
        return f'{self.first_name} {self.last_name}'
