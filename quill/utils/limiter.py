# quill/utils/limiter.py

from slowapi import Limiter
from slowapi.util import get_remote_address

# Limits are attached per route; see routes/auth.py
limiter = Limiter(key_func=get_remote_address)
