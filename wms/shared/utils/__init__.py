from wms.shared.utils.datetime import ensure_utc, utc_now
from wms.shared.utils.generators import generate_cuid, generate_opaque_token

__all__ = [
    "generate_cuid",
    "generate_opaque_token",
    "utc_now",
    "ensure_utc",
]
