from wms.presentation.api.v1.routes import (auth, companies, customers,
                                            permissions, products, roles,
                                            tenants, users, warehouses)

__all__ = [
    "auth",
    "companies",
    "customers",
    "permissions",
    "products",
    "roles",
    "tenants",
    "users",
    "warehouses",
]
