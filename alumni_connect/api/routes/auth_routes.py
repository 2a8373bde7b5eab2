"""
Authentication Routes

POST /auth/register - Register new user
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends

from alumni_connect.core.auth import hash_password, verify_password, create_access_token, get_current_user
from alumni_connect.db.record_store import RecordStore, get_record_store
from alumni_connect.db.tables import users
from alumni_connect.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, StatusResponse, CurrentUser
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=StatusResponse, status_code=201)
async def register(request: RegisterRequest, store: RecordStore = Depends(get_record_store)):
    """
    Register a new user account.
    
    Role is fixed at registration; it decides who the user can message.
    """
    email = request.email.lower()
    if await store.find_one(users, users.c.email == email):
        raise HTTPException(status_code=400, detail="Email already registered")
    
    await store.insert(users, {
        "full_name": request.full_name.strip(),
        "email": email,
        "password_hash": hash_password(request.password),
        "role": request.role.value,
        "is_active": True,
    })
    
    return StatusResponse(message=f"Registered successfully as {request.role.value}. Please login.")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, store: RecordStore = Depends(get_record_store)):
    """
    Login and receive JWT access token.
    
    Include token in requests: Authorization: Bearer <token>
    """
    user = await store.find_one(users, users.c.email == request.email.lower())
    
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    
    if not user["is_active"]:
        raise HTTPException(status_code=403, detail="Account deactivated")
    
    if not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    
    token = create_access_token(data={"sub": str(user["id"]), "role": user["role"]})
    
    return TokenResponse(access_token=token, user_id=user["id"], role=user["role"])


@router.get("/me", response_model=UserResponse)
async def get_me(
    user: CurrentUser = Depends(get_current_user),
    store: RecordStore = Depends(get_record_store)
):
    """Get current authenticated user's info."""
    row = await store.find_one(users, users.c.id == user.id)
    return UserResponse.model_validate(row)
