from wms.infrastructure.security.jwt import (create_access_token,
                                             generate_refresh_token,
                                             verify_token)
from wms.infrastructure.security.password import (get_password_hash,
                                                  verify_password)

__all__ = [
    "create_access_token",
    "generate_refresh_token",
    "verify_token",
    "get_password_hash",
    "verify_password",
]
