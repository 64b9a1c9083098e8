from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from helpdesk.database import get_db
from helpdesk.schemas.user import UserRegister, UserLogin, UserOut
from helpdesk.schemas.tokens import Token
from helpdesk.schemas.response import ApiResponse, send_response
from helpdesk.services.user_service import UserService

router = APIRouter()

@router.post("/register", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    token, new_user = UserService(db).register(
        username=user.username,
        email=user.email,
        password=user.password,
        name=user.name,
    )
    return send_response(
        Token(access_token=token, user=UserOut.model_validate(new_user)),
        status.HTTP_201_CREATED,
    )

@router.post("/login", response_model=ApiResponse)
def login(user: UserLogin, db: Session = Depends(get_db)):
    token, db_user = UserService(db).login(user.username, user.password)
    return send_response(Token(access_token=token, user=UserOut.model_validate(db_user)))
