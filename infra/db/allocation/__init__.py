from infra.db.allocation.mapper import allocation_from_orm, allocation_to_orm
from infra.db.allocation.repository import SqlAlchemyAllocationStore

__all__ = [
    "allocation_to_orm",
    "allocation_from_orm",
    "SqlAlchemyAllocationStore",
]
