# streetfood_connect/schemas/users.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["vendor", "supplier"]


class RegisterPayload(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    email: str = Field(min_length=1, max_length=254)
    password: str = Field(min_length=1, max_length=128)
    confirmPassword: str
    phone: Optional[str] = Field(default=None, max_length=32)
    location: Optional[str] = Field(default=None, max_length=200)
    role: Role
    # suppliers only
    businessType: Optional[str] = None
    specialties: List[str] = []

    def profile_fields(self) -> dict:
        """Fields stored on the profile document; passwords never are."""
        data = self.model_dump(exclude={"password", "confirmPassword"}, exclude_none=True)
        if self.role != "supplier":
            data.pop("businessType", None)
            data.pop("specialties", None)
        return data


class LoginPayload(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    role: Role


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=32)
    location: Optional[str] = Field(default=None, max_length=200)
    businessType: Optional[str] = None
    specialties: Optional[List[str]] = None


class UserProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    uid: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    businessType: Optional[str] = None
    specialties: List[str] = []
    rating: float = 0
    verified: bool = False
    createdAt: Optional[datetime] = None


class SessionResponse(BaseModel):
    message: str
    state: str
    role: Optional[Role] = None
    user: Optional[UserProfile] = None
    redirect: Optional[str] = None
