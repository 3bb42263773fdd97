# backend/routes/profile.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from database import get_db
from models.profile import Profile
from models.users import User
from utils.tokenJWT import get_current_user
from utils.audit import write_log, client_ip
from schemas.profile import ProfileOut, ProfileUpdate
from services.repositories import ProfileRepository

router = APIRouter(prefix="/profile", tags=["Profile"])

# JSON field name -> profiles column
_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "email": "email",
    "address": "address",
    "city": "city",
    "state": "state",
    "zip": "zip",
}

def _profile_to_out(profile: Profile) -> ProfileOut:
    data = {key: getattr(profile, column) for key, column in _FIELDS.items()}
    return ProfileOut(userId=profile.user_id, **data)


# Retrieve the current user's profile
@router.get("", response_model=ProfileOut)
def get_profile(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _profile_to_out(ProfileRepository(db).get_by_user_id(current_user.id))


# Update the current user's profile
@router.put("", response_model=ProfileOut)
def update_profile(payload: ProfileUpdate, request: Request, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    fields = {_FIELDS[key]: value for key, value in payload.model_dump(exclude_unset=True).items()}
    try:
        profile = ProfileRepository(db).update(current_user.id, fields)
        db.commit()
    except Exception:
        db.rollback()
        raise
    out = _profile_to_out(profile)

    # Log the profile update action
    write_log(
        db,
        user_id=current_user.id,
        action="PROFILE_UPDATE",
        resource="profile",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"fields": sorted(fields)},
    )

    return out
