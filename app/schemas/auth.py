from pydantic import BaseModel


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResponse(BaseModel):
    user_id: str
    username: str
    first_name: str
    last_name: str
    role: str
    is_admin: bool
    token: str
    expires_at: str
