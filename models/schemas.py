from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional

# bcrypt refuses input longer than this many bytes
PASSWORD_MAX_BYTES = 72

class UserUpdate(BaseModel):
    """Profile fields a user may change. Unset fields are left untouched."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=8, max_length=PASSWORD_MAX_BYTES)
    phone: Optional[str] = Field(None, max_length=30)
    country: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    address: Optional[str] = Field(None, max_length=255)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes in UTF-8")
        return v

class TrainerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    bio: Optional[str] = None
    specialty: Optional[str] = Field(None, max_length=100)
    experience_years: int = Field(0, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)

class TrainerUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    bio: Optional[str] = None
    specialty: Optional[str] = Field(None, max_length=100)
    experience_years: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)

    # Omitted is fine, an explicit null is not: both columns are NOT NULL
    @field_validator("name", "experience_years")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v
