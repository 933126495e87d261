from .unit_of_work import (
    DatabaseUnitOfWork,
    get_unit_of_work,
    make_unit_of_work_factory,
)

__all__ = ["DatabaseUnitOfWork", "get_unit_of_work", "make_unit_of_work_factory"]
