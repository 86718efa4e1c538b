from fastapi import APIRouter, Depends

from ..services import identity, management
from .deps import get_db
from .schemas import LoginRequest
from .serializers import serialize_employee, serialize_user

router = APIRouter(prefix="/employee", tags=["employee"])


@router.post("/login")
async def login(payload: LoginRequest, db=Depends(get_db)):
    result = await identity.login(db, "employee", payload.phone, payload.password)
    return {"token": result.token, "role": result.role, "employee": serialize_employee(result.principal)}


@router.get("/users")
async def list_users(db=Depends(get_db)):
    users = await management.list_users(db)
    return {"users": [serialize_user(u) for u in users]}


@router.get("/user/{user_id}")
async def get_user(user_id: str, db=Depends(get_db)):
    user = await management.get_user_details(db, user_id)
    return {"user": serialize_user(user)}
