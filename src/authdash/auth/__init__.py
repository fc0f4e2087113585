from authdash.auth.crud import (
    authenticate,
    create_session,
    create_user,
    delete_session,
    delete_user_sessions,
    get_user_by_email,
    get_user_by_id,
    get_user_by_username,
    get_valid_session,
    list_user_sessions,
    update_password,
)
from authdash.auth.deps import (
    CurrentSessionDep,
    OptionalSessionDep,
    SessionDep,
    get_current_session,
    get_optional_session,
)
from authdash.auth.models import (
    AuthResponse,
    AuthSession,
    ForgetPassword,
    ResetPassword,
    SessionPublic,
    SessionResponse,
    SignInEmail,
    SignInUsername,
    SignUpEmail,
    StatusResponse,
    SuccessResponse,
    User,
    UserCreate,
    UserPublic,
)

__all__ = [
    # Models
    "AuthResponse",
    "AuthSession",
    # Dependencies
    "CurrentSessionDep",
    "ForgetPassword",
    "OptionalSessionDep",
    "ResetPassword",
    "SessionDep",
    "SessionPublic",
    "SessionResponse",
    "SignInEmail",
    "SignInUsername",
    "SignUpEmail",
    "StatusResponse",
    "SuccessResponse",
    "User",
    "UserCreate",
    "UserPublic",
    # CRUD
    "authenticate",
    "create_session",
    "create_user",
    "delete_session",
    "delete_user_sessions",
    "get_current_session",
    "get_optional_session",
    "get_user_by_email",
    "get_user_by_id",
    "get_user_by_username",
    "get_valid_session",
    "list_user_sessions",
    "update_password",
]
