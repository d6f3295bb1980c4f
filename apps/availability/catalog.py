"""
Service catalogue reads the engine depends on: service durations and
which employees may perform a service. Every lookup is scoped to one salon.
"""
import uuid

from apps.employees.models import Employee
from apps.salons.models import Salon
from apps.services.models import Service
from .exceptions import InvalidRequestError, NotFoundError


def as_uuid(value, label: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise InvalidRequestError(f"Malformed {label}: {value!r}")


class ServiceCatalog:

    def __init__(self, salon):
        self.salon = salon

    def get_service(self, service_id) -> Service:
        service_id = as_uuid(service_id, 'service id')
        service = Service.objects.filter(id=service_id, salon=self.salon, is_active=True).first()
        if service is None:
            raise NotFoundError(f"Service {service_id} not found.")
        return service

    def get_employee(self, employee_id) -> Employee:
        employee_id = as_uuid(employee_id, 'employee id')
        employee = Employee.objects.filter(id=employee_id, salon=self.salon, is_active=True).first()
        if employee is None:
            raise NotFoundError(f"Employee {employee_id} not found.")
        return employee

    def duration_of(self, service_id) -> int:
        return self.get_service(service_id).duration_minutes

    def employees_for(self, service) -> list:
        """Eligible active employees, ascending id so assignment is deterministic."""
        return list(
            Employee.objects
            .filter(salon=self.salon, services=service, is_active=True)
            .order_by('id')
        )

    def is_eligible(self, employee, service) -> bool:
        return employee.services.filter(id=service.id).exists()


def get_salon(salon_id) -> Salon:
    salon_id = as_uuid(salon_id, 'salon id')
    salon = Salon.objects.filter(id=salon_id, is_active=True).first()
    if salon is None:
        raise NotFoundError(f"Salon {salon_id} not found.")
    return salon
