from pydantic import BaseModel
from typing import Optional

REQUIRED_FIELDS = ("name", "email", "role", "department")


class EmployeeCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None

    def missing_fields(self):
        return [f for f in REQUIRED_FIELDS if not getattr(self, f)]


class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None

    def blank_fields(self):
        # Sent but empty; creation would reject these as missing.
        return [f for f in self.model_fields_set if f in REQUIRED_FIELDS and not getattr(self, f)]

