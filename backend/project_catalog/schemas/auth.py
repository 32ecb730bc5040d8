from pydantic import AliasChoices, BaseModel, Field
from .user import UserIdentity


class UserRegister(BaseModel):
    username: str = ""
    email: str = ""
    password: str = ""


class UserLogin(BaseModel):
    # One field for both: clients may send it as email or username
    identifier: str = Field(
        default="",
        validation_alias=AliasChoices("identifier", "email", "username"),
    )
    password: str = ""


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthResponse(Token):
    user: UserIdentity
