"""
FastAPI REST API Module

HTTP teller over a single in-memory AccountDirectory. Every operation on an
existing account carries the PIN in the request body and is authenticated
before it runs; wrong PINs count against the account across requests
until it is locked out.
"""

from datetime import datetime, timezone
from typing import Optional
from fastapi import FastAPI, HTTPException, Depends, status
from pydantic import BaseModel, Field
import uvicorn

from .accounts import Account, TransactionResult
from .authentication import AttemptTracker, AuthenticationStatus
from .config import get_config
from .directory import AccountDirectory, DuplicateAccountError


# Pydantic models for API requests
class CreateAccountRequest(BaseModel):
    identifier: str
    holder_name: str
    pin: str = Field(..., description="4-6 digit numeric PIN")
    initial_deposit: Optional[str] = Field(None, description="Decimal amount as string")


class PinRequest(BaseModel):
    pin: str


class AmountRequest(PinRequest):
    amount: str = Field(..., description="Decimal amount as string")


# Single directory and attempt tracker for the process
directory = AccountDirectory()
attempt_tracker = AttemptTracker()


app = FastAPI(
    title="Bank Ledger API",
    description="In-memory account ledger with PIN authentication",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


# Dependency to get the account directory
def get_directory() -> AccountDirectory:
    return directory


# Dependency to get the PIN attempt tracker
def get_attempt_tracker() -> AttemptTracker:
    return attempt_tracker


def _authenticated_account(directory: AccountDirectory, tracker: AttemptTracker,
                           identifier: str, pin: str) -> Account:
    result = tracker.authenticate(directory, identifier, pin)
    if result.status == AuthenticationStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail="Account not found")
    if result.status == AuthenticationStatus.LOCKED_OUT:
        raise HTTPException(status_code=423, detail="Maximum PIN attempts exceeded")
    if result.status == AuthenticationStatus.AUTH_FAILED:
        raise HTTPException(status_code=401, detail="Incorrect PIN")
    return result.account


def _transaction_response(account: Account, result: TransactionResult) -> dict:
    if not result.success:
        raise HTTPException(status_code=422, detail=result.outcome.value)
    return {
        "identifier": account.identifier,
        "outcome": result.outcome.value,
        "amount": str(result.amount),
        "balance": str(result.balance)
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.post("/accounts", status_code=status.HTTP_201_CREATED)
async def create_account(
    request: CreateAccountRequest,
    directory: AccountDirectory = Depends(get_directory)
):
    """Create a new account"""
    try:
        account = directory.create_account(
            identifier=request.identifier,
            holder_name=request.holder_name,
            pin=request.pin,
            initial_deposit=request.initial_deposit or None
        )
    except DuplicateAccountError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "identifier": account.identifier,
        "holder_name": account.holder_name,
        "balance": str(account.balance()),
        "message": "Account created successfully"
    }


@app.post("/accounts/{identifier}/deposit")
async def deposit(
    identifier: str,
    request: AmountRequest,
    directory: AccountDirectory = Depends(get_directory),
    tracker: AttemptTracker = Depends(get_attempt_tracker)
):
    """Deposit money into an account"""
    account = _authenticated_account(directory, tracker, identifier, request.pin)
    return _transaction_response(account, account.deposit(request.amount))


@app.post("/accounts/{identifier}/withdraw")
async def withdraw(
    identifier: str,
    request: AmountRequest,
    directory: AccountDirectory = Depends(get_directory),
    tracker: AttemptTracker = Depends(get_attempt_tracker)
):
    """Withdraw money from an account"""
    account = _authenticated_account(directory, tracker, identifier, request.pin)
    return _transaction_response(account, account.withdraw(request.amount))


@app.post("/accounts/{identifier}/balance")
async def get_balance(
    identifier: str,
    request: PinRequest,
    directory: AccountDirectory = Depends(get_directory),
    tracker: AttemptTracker = Depends(get_attempt_tracker)
):
    """Get account summary and balance"""
    account = _authenticated_account(directory, tracker, identifier, request.pin)
    return {
        "identifier": account.identifier,
        "holder_name": account.holder_name,
        "balance": str(account.balance())
    }


@app.post("/accounts/{identifier}/history")
async def get_history(
    identifier: str,
    request: PinRequest,
    directory: AccountDirectory = Depends(get_directory),
    tracker: AttemptTracker = Depends(get_attempt_tracker)
):
    """Get the account's transaction history"""
    account = _authenticated_account(directory, tracker, identifier, request.pin)
    return {
        "identifier": account.identifier,
        "transactions": [
            {"timestamp": record.timestamp.isoformat(), "message": record.message}
            for record in account.history()
        ],
        "lines": list(account.history_lines())
    }


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    uvicorn.run(
        "bank_ledger.api:app",
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level=config.log_level.lower()
    )
