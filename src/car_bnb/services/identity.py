"""
Email and password identity provider.

Credentials are bcrypt hashes stored on the User record. sign_up and sign_in
return the User whose id is the stable user identifier the rest of the app
works with; the caller populates its Session from it.
"""
import logging
from typing import Optional

import bcrypt
import bson
import mongoengine
from pymongo.errors import PyMongoError

from car_bnb.data.users import User
from car_bnb.infrastructure.errors import AuthError, StoreError, ValidationError
from car_bnb.infrastructure.state import Session

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()  # Fresh salt per hash; stored inside the hash.
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8'),
    )


def normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def find_account_by_email(email: str) -> Optional[User]:
    try:
        return User.objects(email=normalize_email(email)).first()
    except PyMongoError as e:
        raise StoreError('find user', str(e)) from e


def find_user(user_id: str) -> Optional[User]:
    if not user_id or not bson.ObjectId.is_valid(user_id):
        return None
    try:
        return User.objects(id=user_id).first()
    except PyMongoError as e:
        raise StoreError('find user', str(e)) from e


"""
Register a new account and return its profile.

Parameters:
    email: Sign-in email; trimmed and lower-cased before storing.
    password: At least MIN_PASSWORD_LENGTH characters.
    first_name, last_name: Required display name parts.
    is_owner: Role chosen at sign-up.

Raises:
    ValidationError for missing fields or a short password.
    AuthError if the email is already registered.
"""
def sign_up(email: str, password: str, first_name: str, last_name: str, is_owner: bool) -> User:
    email = normalize_email(email)
    first_name = (first_name or '').strip()
    last_name = (last_name or '').strip()
    password = (password or '').strip()

    for field, value in (('email', email), ('password', password),
                         ('first name', first_name), ('last name', last_name)):
        if not value:
            raise ValidationError(field, 'is required')

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError('password', f'must be at least {MIN_PASSWORD_LENGTH} characters')

    if find_account_by_email(email):
        raise AuthError(f'An account with email {email} already exists.')

    user = User()
    user.first_name = first_name
    user.last_name = last_name
    user.email = email
    user.is_owner = bool(is_owner)
    user.password_hash = hash_password(password)

    try:
        user.save()
    except mongoengine.NotUniqueError as e:
        # Lost a race with another sign-up for the same email.
        raise AuthError(f'An account with email {email} already exists.') from e
    except (PyMongoError, mongoengine.OperationError) as e:
        raise StoreError('sign up', str(e)) from e

    logger.info("Created %s account %s", 'owner' if user.is_owner else 'renter', user.id)
    return user


def sign_in(email: str, password: str) -> User:
    email = normalize_email(email)
    password = (password or '').strip()
    if not email or not password:
        raise ValidationError('credentials', 'enter email and password')

    user = find_account_by_email(email)
    # Same error for unknown email and wrong password.
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Rejected sign-in for %s", email)
        raise AuthError()

    logger.info("User %s signed in", user.id)
    return user


def sign_out(session: Session):
    if session.is_authenticated:
        logger.info("User %s signed out", session.uid)
    session.reset()
