from fastapi import APIRouter, Depends

from ..logging_config import get_logger
from ..security import Principal
from ..services import accounts, history, identity
from .deps import current_principal, get_db
from .schemas import AmountIn, LoginRequest, RegisterRequest, TransferIn
from .serializers import serialize_tx, serialize_user

logger = get_logger("bank_portal.api.users")

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/register", status_code=201)
async def register(payload: RegisterRequest, db=Depends(get_db)):
    """
    Self-registration for bank customers.
    """
    logger.info("Register attempt phone=%s account_type=%s", payload.phone, payload.account_type)
    user = await identity.register_user(
        db,
        name=payload.name,
        phone=payload.phone,
        aadhaar=payload.aadhaar,
        password=payload.password,
        account_type=payload.account_type,
        initial_deposit=payload.initial_deposit,
    )
    return {"message": "User registered successfully", "user": serialize_user(user)}


@router.post("/login")
async def login(payload: LoginRequest, db=Depends(get_db)):
    result = await identity.login(db, "user", payload.phone, payload.password)
    return {"token": result.token, "role": result.role, "user": serialize_user(result.principal)}


@router.get("/me")
async def me(principal: Principal = Depends(current_principal), db=Depends(get_db)):
    user = await identity.get_profile(db, principal.principal_id)
    return {"user": serialize_user(user)}


@router.post("/deposit")
async def deposit(payload: AmountIn, principal: Principal = Depends(current_principal), db=Depends(get_db)):
    result = await accounts.deposit(db, principal.principal_id, payload.amount)
    return {
        "message": "Deposit successful",
        "balance": float(result.balance),
        "transaction": serialize_tx(result.transaction),
    }


@router.post("/withdraw")
async def withdraw(payload: AmountIn, principal: Principal = Depends(current_principal), db=Depends(get_db)):
    result = await accounts.withdraw(db, principal.principal_id, payload.amount)
    return {
        "message": "Withdrawal successful",
        "balance": float(result.balance),
        "transaction": serialize_tx(result.transaction),
    }


@router.post("/transfer")
async def transfer(payload: TransferIn, principal: Principal = Depends(current_principal), db=Depends(get_db)):
    """
    Transfer funds to another customer identified by phone.
    """
    result = await accounts.transfer(db, principal.principal_id, payload.to_phone, payload.amount)
    return {
        "message": "Transfer successful",
        "balance": float(result.balance),
        "transaction": serialize_tx(result.transaction),
    }


@router.get("/history")
async def get_history(principal: Principal = Depends(current_principal), db=Depends(get_db)):
    txs = await history.get_history(db, principal.principal_id)
    return {"transactions": [serialize_tx(t) for t in txs]}
