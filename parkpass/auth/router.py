from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from parkpass.database import get_db
from parkpass.auth.schemas import UserCreate, User, LoginRequest, AuthResponse, VehicleCreate, Vehicle
from parkpass.auth.service import UserService
from parkpass.auth.utils import create_access_token
from parkpass.auth.dependencies import get_current_user

router = APIRouter()

@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    """Register a new customer or owner"""
    try:
        return UserService.create_user(db=db, user=user)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.post("/login", response_model=AuthResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    user = UserService.authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return AuthResponse(access_token=access_token, token_type="bearer", user=user)

@router.get("/me", response_model=User)
def read_users_me(current_user: User = Depends(get_current_user)):
    """Get current user profile"""
    return current_user

@router.post("/vehicles", response_model=Vehicle, status_code=status.HTTP_201_CREATED)
def add_vehicle(
    vehicle: VehicleCreate,
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Register a vehicle that bookings can be made for"""
    return UserService.add_vehicle(db, current_user.id, vehicle)

@router.get("/vehicles", response_model=List[Vehicle])
def list_vehicles(current_user = Depends(get_current_user), db: Session = Depends(get_db)):
    return UserService.get_user_vehicles(db, current_user.id)
