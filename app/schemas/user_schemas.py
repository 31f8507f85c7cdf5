import re

from pydantic import BaseModel, Field, field_validator
from typing import Optional


def only_digits(value: str) -> str:
    return re.sub(r"\D", "", value or "")


class UserRegister(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    telefone: str
    cpf: str

    @field_validator("telefone")
    @classmethod
    def validate_telefone(cls, value: str) -> str:
        digits = only_digits(value)
        if len(digits) < 10 or len(digits) > 11:
            raise ValueError("The phone number must contain 10 or 11 digits.")
        return digits

    @field_validator("cpf")
    @classmethod
    def validate_cpf(cls, value: str) -> str:
        if not re.fullmatch(r"\d{11}", value):
            raise ValueError("The CPF must contain exactly 11 digits.")
        return value


class UserLogin(BaseModel):
    credential: str

    @field_validator("credential")
    @classmethod
    def validate_credential(cls, value: str) -> str:
        digits = only_digits(value)
        if len(digits) < 10 or len(digits) > 11:
            raise ValueError("The credential must be a CPF (11 digits) or a phone (10-11 digits).")
        return value


class UserPublic(BaseModel):
    id: int
    name: str
    cpf: Optional[str] = None
    telefone: Optional[str] = None


class AuthResponse(BaseModel):
    message: str
    user: UserPublic
    access_token: str
    token_type: str = "bearer"


class CustomerUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    cpf: Optional[str] = Field(default=None, max_length=14)
    telefone: Optional[str] = Field(default=None, max_length=15)
