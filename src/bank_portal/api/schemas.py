from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PHONE_PATTERN = r"^\d{10}$"
AADHAAR_PATTERN = r"^\d{12}$"


class LoginRequest(BaseModel):
    phone: str = Field(..., min_length=1, examples=["9876543210"])
    password: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., pattern=PHONE_PATTERN, examples=["9876543210"])
    aadhaar: str = Field(..., pattern=AADHAAR_PATTERN, examples=["123456789012"])
    password: str = Field(..., min_length=1)
    account_type: Literal["savings", "current"] = Field("savings", alias="accountType")
    initial_deposit: Optional[Decimal] = Field(None, ge=0, alias="initialDeposit")


class EmployeeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., pattern=PHONE_PATTERN, examples=["9999999999"])
    aadhaar: str = Field(..., pattern=AADHAAR_PATTERN, examples=["123456789012"])
    password: str = Field(..., min_length=1)


class AmountIn(BaseModel):
    # sign is checked by the account service so the error names the amount
    amount: Decimal = Field(..., examples=[500])


class TransferIn(AmountIn):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    to_phone: str = Field(..., min_length=1, alias="toPhone", examples=["9123456780"])
