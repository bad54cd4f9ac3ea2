"""Domain enumerations for the WMS application."""

from enum import Enum


class WarehouseStatus(str, Enum):
    """Operational status of a warehouse"""

    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [member.value for member in cls]


class CustomerType(str, Enum):
    """Legal person (PJ) or natural person (PF)"""

    PJ = "PJ"
    PF = "PF"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [member.value for member in cls]


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [member.value for member in cls]


class ProductCategory(str, Enum):
    """Storage category of a product"""

    DRY = "dry"
    REFRIGERATED = "refrigerated"
    FROZEN = "frozen"
    PERISHABLE = "perishable"
    CONTROLLED = "controlled"
    BULK_VOLUME = "bulk_volume"
    SMALL_VOLUME = "small_volume"
    HIGH_VALUE = "high_value"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [member.value for member in cls]


class ProductType(str, Enum):
    """Handling type of a product"""

    COMMODITY = "commodity"
    FRACTIONABLE = "fractionable"
    FRAGILE = "fragile"
    HEAVY = "heavy"
    LIQUID = "liquid"
    GASEOUS = "gaseous"
    BULKY = "bulky"
    ISOLATION_REQUIRED = "isolation_required"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [member.value for member in cls]


class StorageZone(str, Enum):
    """Warehouse zone a product is stored in by default"""

    PICKING = "picking"
    RESERVE = "reserve"
    CROSS_DOCK = "cross_dock"
    QUARANTINE = "quarantine"
    DAMAGE = "damage"
    REFRIGERATED = "refrigerated"
    FROZEN = "frozen"
    CONTROLLED = "controlled"
    CONSOLIDATION = "consolidation"
    PACKING = "packing"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [member.value for member in cls]


class ABCClassification(str, Enum):
    """Turnover class used for slotting reports"""

    A = "A"
    B = "B"
    C = "C"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [member.value for member in cls]
