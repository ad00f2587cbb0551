from uuid import UUID

from fastapi import HTTPException, status
from passlib.context import CryptContext

from app.auth.auth import create_session_token
from app.config.config import settings
from app.repositories.base import Repository
from app.schemas.status_schema import UserRole
from app.schemas.user_schemas import (
    AccountSchema,
    LoginResponse,
    LoginSchema,
    ProfileSchema,
    SignupResponse,
    SignupSchema,
    VerifyEmailSchema,
)
from app.utils.logger_config import setup_logger
from app.utils.utils import generate_verification_code

logger = setup_logger()

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

INVALID_CREDENTIALS = "Invalid email or password. Please check your credentials."
EMAIL_NOT_CONFIRMED = (
    "Please check your email and click the confirmation link before signing in."
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


async def signup(repository: Repository, signup_data: SignupSchema) -> SignupResponse:
    """
    Register a new account.

    The profile is not created here; it is created on first sign-in, the
    same way as for accounts provisioned elsewhere.
    """
    needs_verification = settings.REQUIRE_EMAIL_VERIFICATION
    verification_code = generate_verification_code() if needs_verification else None

    account = await repository.create_account(
        email=signup_data.email,
        password=hash_password(signup_data.password),
        name=signup_data.name.strip(),
        email_verified=not needs_verification,
        verification_code=verification_code,
    )
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Email already registered"
        )

    if needs_verification:
        # No mail transport: the code is handed over through the log
        logger.info(f"Verification code for {account.email}: {verification_code}")
        message = "Account created! Please check your email to verify your account."
    else:
        message = "Account created!"

    return SignupResponse(
        id=account.id,
        email=account.email,
        name=account.name,
        email_verified=account.email_verified,
        message=message,
    )


async def verify_email(repository: Repository, data: VerifyEmailSchema) -> dict:
    account = await repository.get_account_by_email(data.email)
    if account is None or account.verification_code != data.code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid verification code",
        )
    await repository.mark_account_verified(account.id)
    return {"message": "Email verified. You can now sign in."}


async def load_or_create_profile(
    repository: Repository,
    account: AccountSchema,
    selected_role: UserRole | None = None,
) -> ProfileSchema:
    """
    Fetch the profile for a signed-in account, creating it on first sign-in.

    A role picked at login replaces the stored one, and only when role
    selection is enabled; otherwise it is ignored, first sign-in included.
    """
    if not settings.ALLOW_ROLE_SELECTION:
        selected_role = None

    profile, created = await repository.get_or_create_profile(
        user_id=account.id,
        name=account.name or account.email.split("@")[0],
        email=account.email,
        role=selected_role or UserRole.USER,
        credits=settings.STARTING_CREDITS,
    )
    if created:
        logger.info(f"Created profile for {account.email} with role {profile.role.value}")

    if selected_role and selected_role != profile.role:
        profile = await repository.update_profile(account.id, role=selected_role)
        logger.info(f"Switched role of {account.email} to {selected_role.value}")

    return profile


async def login(repository: Repository, login_data: LoginSchema) -> LoginResponse:
    """
    Authenticate and open a session.

    Args:
        repository: Storage backend
        login_data: Login credentials and optional role

    Returns:
        The profile and a bearer token bound to a new session
    """
    account = await repository.get_account_by_email(login_data.email)

    if not account or not verify_password(login_data.password, account.password):
        logger.warning(f"Failed login attempt for {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail=INVALID_CREDENTIALS
        )

    if settings.REQUIRE_EMAIL_VERIFICATION and not account.email_verified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=EMAIL_NOT_CONFIRMED
        )

    profile = await load_or_create_profile(repository, account, login_data.role)
    session = await repository.create_session(account.id)

    return LoginResponse(
        user=profile,
        token=create_session_token(account.id, session.id, profile.role),
    )


async def logout(repository: Repository, session_id: UUID) -> dict:
    """Revoke the session behind the current token"""
    revoked = await repository.revoke_session(session_id)
    if not revoked:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token"
        )
    return {"message": "Successfully logged out"}
