from fastapi import APIRouter, Depends

from ..logging_config import get_logger
from ..services import identity, management
from .deps import get_db
from .schemas import EmployeeCreate, LoginRequest
from .serializers import serialize_admin, serialize_employee

logger = get_logger("bank_portal.api.admin")

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/login")
async def login(payload: LoginRequest, db=Depends(get_db)):
    result = await identity.login(db, "admin", payload.phone, payload.password)
    return {"token": result.token, "role": result.role, "admin": serialize_admin(result.principal)}


@router.post("/create-employee", status_code=201)
async def create_employee(payload: EmployeeCreate, db=Depends(get_db)):
    logger.info("Creating employee phone=%s", payload.phone)
    employee = await management.create_employee(
        db,
        name=payload.name,
        phone=payload.phone,
        aadhaar=payload.aadhaar,
        password=payload.password,
    )
    return {"message": "Employee created successfully", "employee": serialize_employee(employee)}


@router.get("/employees")
async def list_employees(db=Depends(get_db)):
    employees = await management.list_employees(db)
    return {"employees": [serialize_employee(e) for e in employees]}


@router.delete("/employee/{employee_id}")
async def delete_employee(employee_id: str, db=Depends(get_db)):
    await management.delete_employee(db, employee_id)
    return {"message": "Employee deleted successfully"}
