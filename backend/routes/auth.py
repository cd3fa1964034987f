# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from utils.tokenJWT import create_access_token, get_current_user
from utils.audit import write_log
from models.users import User, authenticate
from schemas import user as schemas
from store import AppStore, get_store

router = APIRouter(tags=["Auth"])


# Authenticate operator against the fixed credential table and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, store: AppStore = Depends(get_store)):
    user = authenticate(payload.username, payload.password)
    ip = request.client.host if request.client else None

    # Validate credentials and log failure on error
    if not user:
        write_log(store, user_id=None, action="LOGIN", resource="auth",
                  status="FAIL", ip=ip, meta={"username": payload.username})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": user.username, "role": user.role})

    write_log(store, user_id=user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=ip, meta={"username": user.username})

    return {"access_token": access_token, "token_type": "bearer"}


# Retrieve current authenticated operator
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
