# models package for SQLModel models
from .company import Company  # noqa: F401  (import for metadata registration)
from .equipment import Equipment, EquipmentStatus  # noqa: F401
from .equipment_type import EquipmentType  # noqa: F401
from .maintenance_type import MaintenanceType, DefectCategory  # noqa: F401
from .movement import Movement, MovementType  # noqa: F401
from .state import State  # noqa: F401
from .fleet import FleetRecord  # noqa: F401
