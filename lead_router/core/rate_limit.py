from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared limiter instance; attached to ``app.state`` in ``lead_router.main``
limiter = Limiter(key_func=get_remote_address)
