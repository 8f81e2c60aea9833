import logging

import pycouchdb
from fastapi import Request

from app.settings import Settings, settings

logger = logging.getLogger(__name__)


def open_couch(settings_obj: Settings = settings):
    """
    Connect to CouchDB and return the blog database handle.
    The database is created on first start if it does not exist yet.
    """
    server = pycouchdb.Server(settings_obj.couchdb_url)
    try:
        database = server.database(settings_obj.COUCHDB_DATABASE)
    except pycouchdb.exceptions.NotFound:
        logger.info(f"Creating CouchDB database {settings_obj.COUCHDB_DATABASE}")
        database = server.create(settings_obj.COUCHDB_DATABASE)
    return database


def close_couch(database) -> None:
    """Release the HTTP session held by the database handle."""
    session = getattr(getattr(database, "resource", None), "session", None)
    if session is not None:
        session.close()


def get_couch(request: Request):
    """Database handle opened by the application lifespan."""
    return request.app.state.couch
