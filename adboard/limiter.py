
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import get_settings

_settings = get_settings()

# key_func: identify the caller by IP address
# storage_uri: memory:// by default, redis:// in multi-worker deployments
# default_limits: enforced by SlowAPIMiddleware on routes without their own limit
# enabled: overwritten by create_app from the settings it is given
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=_settings.RATE_LIMIT_STORAGE_URI,
    default_limits=[_settings.RATE_LIMIT_DEFAULT],
    enabled=_settings.RATE_LIMIT_ENABLED,
)
