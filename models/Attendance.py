from pydantic import BaseModel
from typing import Optional


class AttendanceLoginRequest(BaseModel):
    employeeId: Optional[str] = None
    status: Optional[str] = None

