from uuid import UUID

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from tasktracker.core.modules.user.models import UserView
from tasktracker.web.cookies import clear_session_cookie, set_session_cookie
from tasktracker.web.deps import AppDep, ConfigDep, OptionalSessionTokenDep, SessionTokenDep, limit_login_attempts
from tasktracker.web.openapi import CreatedResponse, ErrorResponse, MessageResponse

router = APIRouter(tags=["users"])

FORGOT_PASSWORD_MESSAGE = "If the email is registered, you will receive a link to reset your password"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    """New account details."""

    first_name: str = Field(..., min_length=1, description="First name")
    last_name: str = Field(..., min_length=1, description="Last name")
    age: int = Field(..., ge=13, description="Age in years, at least 13")
    email: EmailStr = Field(..., description="Email address, unique per account")
    password: str = Field(..., description="Password")
    confirm_password: str = Field(..., description="Password repeated")


class LoginRequest(CamelModel):
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class LoginResponse(CamelModel):
    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Email address")


class ForgotPasswordRequest(CamelModel):
    email: EmailStr = Field(..., description="Email address of the account")


class ResetPasswordRequest(CamelModel):
    """New password authorized by a reset token."""

    email: EmailStr = Field(..., description="Email address the reset link was sent to")
    token: str = Field(..., min_length=1, description="Reset token from the link")
    password: str = Field(..., description="New password")
    confirm_password: str = Field(..., description="New password repeated")


class EditProfileRequest(CamelModel):
    """Profile fields to change. Omitted fields are left as they are."""

    first_name: str | None = Field(None, min_length=1, description="First name")
    last_name: str | None = Field(None, min_length=1, description="Last name")
    age: int | None = Field(None, ge=13, description="Age in years, at least 13")
    email: EmailStr | None = Field(None, description="Email address, unique per account")


@router.post(
    "/users",
    summary="Register",
    description="Create a new account. Does not log in.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid input or password rejected"},
        409: {"model": ErrorResponse, "description": "Email already in use"},
    },
)
async def register(request: RegisterRequest, app: AppDep) -> CreatedResponse:
    user_id = await app.register(
        request.first_name,
        request.last_name,
        request.age,
        request.email,
        request.password,
        request.confirm_password,
    )
    return CreatedResponse(id=user_id)


@router.post(
    "/users/login",
    summary="Log in",
    description="Authenticate with email and password. The session token is returned in an HTTP-only cookie.",
    operation_id="login",
    dependencies=[Depends(limit_login_attempts)],
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        429: {"model": ErrorResponse, "description": "Too many login attempts"},
    },
)
async def login(request: LoginRequest, app: AppDep, config: ConfigDep, response: Response) -> LoginResponse:
    result = await app.login(request.email, request.password)
    set_session_cookie(response, config, result.session.token)
    return LoginResponse(id=result.user.id, email=result.user.email)


@router.post(
    "/users/logout",
    summary="Log out",
    description="End the current session and clear the session cookie. Always succeeds.",
    operation_id="logout",
    responses={200: {"description": "Logged out"}},
)
async def logout(app: AppDep, config: ConfigDep, token: OptionalSessionTokenDep, response: Response) -> MessageResponse:
    await app.logout(token)
    clear_session_cookie(response, config)
    return MessageResponse(message="Logged out")


@router.post(
    "/users/forgot-password",
    summary="Request password reset",
    description="Email a reset link if the address belongs to an account. The response never reveals whether it does.",
    operation_id="forgotPassword",
    status_code=202,
    responses={
        202: {"description": "Request accepted"},
        500: {"model": ErrorResponse, "description": "Email could not be sent"},
    },
)
async def forgot_password(request: ForgotPasswordRequest, app: AppDep) -> MessageResponse:
    await app.forgot_password(request.email)
    return MessageResponse(message=FORGOT_PASSWORD_MESSAGE)


@router.post(
    "/users/reset-password",
    summary="Reset password",
    description="Set a new password with a reset token. Each token works once.",
    operation_id="resetPassword",
    responses={
        200: {"description": "Password changed"},
        400: {"model": ErrorResponse, "description": "Invalid or expired token, or password rejected"},
    },
)
async def reset_password(request: ResetPasswordRequest, app: AppDep) -> MessageResponse:
    await app.reset_password(request.email, request.token, request.password, request.confirm_password)
    return MessageResponse(message="Password updated")


@router.get(
    "/users/me",
    summary="Get current user profile",
    description="Get the profile of the currently authenticated user.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_me(app: AppDep, token: SessionTokenDep) -> UserView:
    return await app.get_current_user(token)


@router.put(
    "/users/edit-me",
    summary="Edit current user profile",
    description="Change name, age or email of the currently authenticated user.",
    operation_id="editCurrentUser",
    responses={
        200: {"description": "Updated profile"},
        400: {"model": ErrorResponse, "description": "Invalid input"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        409: {"model": ErrorResponse, "description": "Email already in use"},
    },
)
async def edit_me(request: EditProfileRequest, app: AppDep, token: SessionTokenDep) -> UserView:
    return await app.update_current_user(token, request.model_dump(exclude_none=True))


@router.delete(
    "/users/me",
    summary="Delete account",
    description="Delete the current user, all of their tasks, and end the session.",
    operation_id="deleteCurrentUser",
    responses={
        200: {"description": "Account deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def delete_me(app: AppDep, config: ConfigDep, token: SessionTokenDep, response: Response) -> MessageResponse:
    await app.delete_current_user(token)
    clear_session_cookie(response, config)
    return MessageResponse(message="Account deleted")
