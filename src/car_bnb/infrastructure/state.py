"""Signed-in user state.

Exposes:
- Session: the profile of the currently signed-in user (or an empty session before
  login / after logout). One Session is created by the program at startup and passed
  into each flow; nothing reads it from module globals.

A Session has no persistent backing. After a restart it is rebuilt by signing in
again, which re-reads the profile from the users collection.
"""

from typing import Callable, Optional

from car_bnb.data.users import User


class Session:
    FIELDS = ('first_name', 'last_name', 'email', 'uid', 'is_owner_flag')

    def __init__(self):
        self.first_name: Optional[str] = None
        self.last_name: Optional[str] = None
        self.email: Optional[str] = None
        self.uid: Optional[str] = None
        self.is_owner_flag: Optional[bool] = None

    """
    Copy all five profile fields from a loaded User in one step.
    """
    def populate(self, user: User):
        self.first_name = user.first_name or ''
        self.last_name = user.last_name or ''
        self.email = user.email or ''
        self.uid = str(user.id) if user.id else None  # Unsaved user stays signed out.
        self.is_owner_flag = user.is_owner

    """
    Clear every profile field together (logout).
    """
    def reset(self):
        for name in self.FIELDS:
            setattr(self, name, None)

    """
    Role routing: only an explicit True is an owner. Unset or False route to the renter flow.
    """
    def is_owner(self) -> bool:
        return self.is_owner_flag is True

    @property
    def is_authenticated(self) -> bool:
        return self.uid is not None

    @property
    def display_name(self) -> str:
        return f'{self.first_name} {self.last_name}'.strip()

    """Refresh the session from the store by uid, if one is set.

        Behavior:
        - If the session is empty, this is a no-op.
        - If the user record no longer exists, the session is reset.
    """
    def reload(self, find_user: Callable[[str], Optional[User]]):
        if not self.is_authenticated:
            return

        user = find_user(self.uid)
        if user is None:
            self.reset()  # Account was deleted.
        else:
            self.populate(user)
