"""Rate limiting configuration using slowapi.

A module-level Limiter shared by routers (``@limiter.limit(...)``) and
attached to ``app.state`` in main.py. Only decorated endpoints are limited;
today that is the password login.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)
