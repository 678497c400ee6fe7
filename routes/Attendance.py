from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from models.Attendance import AttendanceLoginRequest
from services.config import ATTENDANCE, DEFAULT_ATTENDANCE_STATUS
from services.database import ResourceAccessor, check_key, get_store
from services.errors import BadRequest
from services.gate import require_user

router = APIRouter(dependencies=[Depends(require_user)])


@router.post("/login")
def log_login(req: AttendanceLoginRequest, store: ResourceAccessor = Depends(get_store)):
    if not req.employeeId:
        raise BadRequest("employeeId is required")
    check_key(req.employeeId)

    now = datetime.now(timezone.utc)
    day = now.date().isoformat()
    # One entry per employee per day; a second login the same day overwrites it.
    store.set_at(
        f"{ATTENDANCE}/{req.employeeId}/{day}",
        {"loginTime": now.isoformat(), "status": req.status or DEFAULT_ATTENDANCE_STATUS},
    )
    return {"success": True, "message": "Attendance logged"}


@router.get("/{employee_id}")
def get_attendance(employee_id: str, store: ResourceAccessor = Depends(get_store)):
    return [
        {"date": day, **entry}
        for day, entry in store.read_all(f"{ATTENDANCE}/{employee_id}").items()
        if isinstance(entry, dict)
    ]
