"""Authentication routes package.

This package splits auth functionality into focused modules:
- sign_in: Email and username sign-in
- sign_up: Account registration
- password: Password reset request and completion
- session: Session lookup and sign-out
"""

from fastapi import APIRouter

from authdash.api.routes.auth import password, session, sign_in, sign_up

router = APIRouter(tags=["auth"])

router.include_router(sign_in.router)
router.include_router(sign_up.router)
router.include_router(password.router)
router.include_router(session.router)
