from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from starlette.responses import JSONResponse

from models.Employees import EmployeeCreate, EmployeeUpdate
from services.config import EMPLOYEES
from services.database import ResourceAccessor, get_store
from services.errors import BadRequest
from services.gate import require_user

router = APIRouter(dependencies=[Depends(require_user)])


@router.get("")
def list_employees(store: ResourceAccessor = Depends(get_store)):
    return [
        {"id": employee_id, **employee}
        for employee_id, employee in store.read_all(EMPLOYEES).items()
        if isinstance(employee, dict)
    ]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_employee(req: EmployeeCreate, store: ResourceAccessor = Depends(get_store)):
    missing = req.missing_fields()
    if missing:
        raise BadRequest(f"Missing required fields: {', '.join(missing)}")

    employee = req.model_dump()
    employee["createdAt"] = datetime.now(timezone.utc).isoformat()
    employee_id = store.push(EMPLOYEES, employee)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={"success": True, "id": employee_id, "message": "Employee created"},
    )


@router.put("/{employee_id}")
def update_employee(
    employee_id: str, req: EmployeeUpdate, store: ResourceAccessor = Depends(get_store)
):
    blank = req.blank_fields()
    if blank:
        raise BadRequest(f"Fields cannot be empty: {', '.join(sorted(blank))}")

    changes = req.model_dump(exclude_none=True)
    if not changes:
        raise BadRequest("No fields to update")

    changes["updatedAt"] = datetime.now(timezone.utc).isoformat()
    store.update_at(f"{EMPLOYEES}/{employee_id}", changes)
    return {"success": True, "message": "Employee updated"}


@router.delete("/{employee_id}")
def delete_employee(employee_id: str, store: ResourceAccessor = Depends(get_store)):
    store.delete_at(f"{EMPLOYEES}/{employee_id}")
    return {"success": True, "message": "Employee deleted"}
