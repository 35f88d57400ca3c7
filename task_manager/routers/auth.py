import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from jose import JWTError, jwt
import bcrypt
from sqlmodel import Session, select

from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY
from ..database import get_db
from ..errors import Conflict, Unauthenticated
from ..models import User
from ..schemas.user import AuthResponse, TokenData, User as UserSchema, UserCreate

logger = logging.getLogger(__name__)

router = APIRouter()

ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode('utf-8')[:72]
    hashed_bytes = hashed_password.encode('utf-8') if isinstance(hashed_password, str) else hashed_password
    return bcrypt.checkpw(password_bytes, hashed_bytes)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt directly."""
    password_bytes = password.encode('utf-8')[:72]  # Truncate to 72 bytes (bcrypt limit)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.exec(select(User).where(User.email == email)).first()


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def _get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get("token")


def _decode_token(token: str) -> Optional[TokenData]:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        logger.debug("Rejected invalid or expired token")
        return None
    user_id = payload.get("sub")
    if not user_id:
        return None
    return TokenData(user_id=user_id)


def _set_token_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        key="token",
        value=access_token,
        httponly=True,
        secure=False,  # Set to True in production with HTTPS
        samesite="lax",
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def get_optional_user(
    request: Request,
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Resolve the caller from the bearer token or cookie, or ``None``."""
    token = _get_token_from_request(request)
    if not token:
        return None

    token_data = _decode_token(token)
    if not token_data:
        return None

    return db.get(User, token_data.user_id)


def get_current_user_id(user: Optional[User] = Depends(get_optional_user)) -> Optional[str]:
    return str(user.id) if user else None


def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """Get current user from JWT token."""
    if user is None:
        raise Unauthenticated("Not authenticated")
    return user


def _issue_token(db_user: User, response: Response) -> dict:
    access_token = create_access_token(data={"sub": str(db_user.id)})
    _set_token_cookie(response, access_token)
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": db_user,
    }


@router.post("/signup", response_model=AuthResponse)
def signup(
    user: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create a new user account."""
    if get_user_by_email(db, user.email):
        raise Conflict("Email already registered")

    db_user = User(email=user.email, hashed_password=get_password_hash(user.password))
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s", db_user.id)

    return _issue_token(db_user, response)


@router.post("/signin", response_model=AuthResponse)
def signin(
    user: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
):
    """Sign in and get JWT token."""
    db_user = authenticate_user(db, user.email, user.password)
    if not db_user:
        logger.warning("Failed sign-in attempt for %s", user.email)
        raise Unauthenticated("Incorrect email or password")

    return _issue_token(db_user, response)


@router.post("/signout")
def signout(response: Response):
    """Sign out and clear session cookie."""
    response.delete_cookie(key="token")
    return {"success": True}


@router.get("/session")
def get_session(request: Request, user: Optional[User] = Depends(get_optional_user)):
    """Get current session from JWT."""
    if user is None:
        return {"session": None, "user": None}

    token = _get_token_from_request(request)
    payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    return {
        "session": {
            "expiresAt": datetime.fromtimestamp(payload["exp"], tz=timezone.utc).isoformat(),
            "userId": str(user.id),
        },
        "user": {
            "id": str(user.id),
            "email": user.email,
            "createdAt": user.created_at.isoformat(),
            "updatedAt": user.updated_at.isoformat(),
        },
    }


@router.get("/me", response_model=UserSchema)
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user information."""
    return current_user
