"""Sign-up and log-in endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status

from pixperfect.core.security import create_access_token
from pixperfect.interfaces.http.deps import get_account_service
from pixperfect.modules.accounts import (
    AccountAlreadyExistsError,
    AccountCreateInput,
    AccountService,
    InvalidAccountInputError,
    InvalidCredentialsError,
)
from pixperfect.schemas import LoginRequest, LoginResponse, MessageResponse, SignupRequest

router = APIRouter()


@router.post("/signup", response_model=MessageResponse, summary="Create an account")
async def signup(
    payload: SignupRequest,
    account_service: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        await account_service.create_account(
            AccountCreateInput(username=payload.username, password=payload.password)
        )
    except InvalidAccountInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except AccountAlreadyExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Username already exists") from exc
    return MessageResponse(message="User created successfully")


@router.post("/login", response_model=LoginResponse, summary="Exchange credentials for a bearer token")
async def login(
    payload: LoginRequest,
    account_service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    try:
        account = await account_service.authenticate(payload.username, payload.password)
    except InvalidAccountInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except InvalidCredentialsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid credentials") from exc

    return LoginResponse(token=create_access_token(account.id, account.username))
