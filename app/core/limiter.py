"""SlowAPI limiter shared by main (app.state.limiter) and the routers.

Limits are keyed by client address. Decorated routes must accept a
`request: Request` argument.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

WRITE_ENDPOINT_LIMIT = "60/minute"
UPLOAD_GRANT_LIMIT = "30/minute"
# Public memory wall: anonymous visitors.
MEMORY_SUBMIT_LIMIT = "3 per 15 minutes"

limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)
limit_upload = limiter.limit(UPLOAD_GRANT_LIMIT)
limit_memory_submit = limiter.limit(MEMORY_SUBMIT_LIMIT)
