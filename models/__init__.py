#!/usr/bin/env python3
"""Creates the unique DBStorage instance; the app factory connects it."""
from models.db_storage import DBStorage

storage = DBStorage()
