from pydantic import BaseModel, EmailStr, field_validator, model_validator


class UserRegister(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    name: str | None = None

    @field_validator("password")
    @classmethod
    def password_min_length(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    id: str
    email: str
    name: str | None = None
    resume_count: int = 0

    class Config:
        from_attributes = True


class UserProfileUpdate(BaseModel):
    email: EmailStr | None = None
    name: str | None = None
    current_password: str | None = None
    new_password: str | None = None
    confirm_new_password: str | None = None

    @field_validator("new_password")
    @classmethod
    def password_min_length(cls, v: str | None) -> str | None:
        if v is not None and len(v) < 8:
            raise ValueError("New password must be at least 8 characters")
        return v

    @model_validator(mode="after")
    def password_change_valid(self):
        if self.new_password is not None:
            if not self.current_password:
                raise ValueError("Current password is required to set a new password")
            if self.new_password != self.confirm_new_password:
                raise ValueError("New password and confirmation do not match")
        return self


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
