import secrets
import uuid
from datetime import datetime, timezone
from fastapi import HTTPException
from pwdlib import PasswordHash
from models import User, UserRole, UserStatus
import logging

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

password_hash = PasswordHash.recommended()

def hash_password(password):
    return password_hash.hash(password)

def check_password(password, hashed):
    return password_hash.verify(password, hashed)

def _credential_key(email):
    return email.strip().lower()

async def create_account(store, name, email, phone, password, role=UserRole.CUSTOMER, user_id=None,
                         hashed_password=None):
    """Create a user record and its credentials.

    Pass `hashed_password` to store an already hashed password as is.
    """
    key = _credential_key(email)
    if store.credentials.get(key) is not None:
        raise HTTPException(status_code=409, detail="User with this email already exists")

    now = datetime.now(timezone.utc)
    user = User(
        id=user_id or uuid.uuid4().hex,
        email=email,
        name=name,
        phone=phone,
        role=role,
        status=UserStatus.ACTIVE,
        createdAt=now,
        updatedAt=now,
    )
    if hashed_password is None:
        hashed_password = hash_password(password)
    try:
        store.users.set(user.id, user.model_dump(mode="json"))
        store.credentials.set(key, {"userId": user.id, "passwordHash": hashed_password})
    except Exception as e:
        logger.error(f"Error saving account {email}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Failed to save user data: {str(e)}")
    logger.info(f"User created successfully: {user.id}")
    return user

async def verify_email_password(store, email, password):
    """Verify email/password credentials and return the user id"""
    record = store.credentials.get(_credential_key(email))
    if record is None or not check_password(password, record["passwordHash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return record["userId"]

async def create_session(store, user_id):
    token = secrets.token_urlsafe(32)
    store.sessions.set(token, {
        "userId": user_id,
        "createdAt": datetime.now(timezone.utc).isoformat(),
    })
    return token

async def resolve_session(store, token):
    if not token:
        raise HTTPException(status_code=401, detail="Missing session token")
    session = store.sessions.get(token)
    if session is None:
        raise HTTPException(status_code=401, detail="Session expired or invalid")
    return session["userId"]

async def end_session(store, token):
    if not token:
        raise HTTPException(status_code=401, detail="Missing session token")
    if not store.sessions.delete(token):
        raise HTTPException(status_code=401, detail="Session expired or invalid")

def bearer_token(request):
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()
