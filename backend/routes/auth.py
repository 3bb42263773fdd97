# backend/routes/auth.py
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, get_current_user
from utils.audit import write_log, client_ip
from models.users import User
from schemas import user as schemas
from services.repositories import IdentityResolver, ProfileRepository
from database import get_db

router = APIRouter(tags=["Auth"])

def _normalize_role(role: str) -> str:
    role = (role or "USER").strip().upper()
    return role if role.startswith("ROLE_") else f"ROLE_{role}"

# Register a new user together with an empty profile
@router.post("/register", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    users = IdentityResolver(db)
    username = payload.username.strip()

    if payload.password != payload.confirmPassword:
        raise HTTPException(status_code=400, detail="Passwords do not match")

    # Check for existing user
    if users.exists(username):
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"username": username, "reason": "User exists"})
        raise HTTPException(status_code=400, detail="User Already Exists.")

    try:
        new_user = users.create(username, get_password_hash(payload.password), _normalize_role(payload.role))
        # Every account gets a profile row to fill in before checkout
        ProfileRepository(db).create(new_user.id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(new_user)

    # Log successful registration event
    write_log(db, user_id=new_user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"username": new_user.username})

    return new_user


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    db_user = db.query(User).filter(User.username == payload.username).first()

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.hashed_password):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"username": payload.username})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    # Generate access token
    access_token = create_access_token(data={"sub": db_user.username, "role": db_user.role})

    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"username": db_user.username})

    return {"token": access_token, "token_type": "bearer", "user": schemas.UserResponse.model_validate(db_user)}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
