# Pydantic schemas
from crea.schemas.common import CreaSchema, SuccessResponse, DataResponse
from crea.schemas.auth import (
    UserRegister,
    UserLogin,
    OTPRequest,
    OTPVerify,
    RefreshTokenRequest,
    UserResponse,
    AuthResponse,
    AccessTokenResponse,
    ProfileUpdate,
    AdminUserUpdate,
)
