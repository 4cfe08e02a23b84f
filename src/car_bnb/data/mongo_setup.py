import mongoengine  # Models and the connection registry.

from car_bnb.infrastructure.config import Settings

"""
Initialize MongoEngine and register the application's connection.

- Registers a connection alias named 'core' pointing at the configured database.
- Call this once during application startup before using models that
    specify `meta = {'db_alias': 'core'}` so they bind to this connection.
"""
def global_init(settings: Settings):
    # Lazy: no server round-trip until the first query.
    mongoengine.register_connection(alias='core', name=settings.db_name, host=settings.db_host)
