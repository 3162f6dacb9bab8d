"""FastAPI application exposing the expense tracker backend."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Optional

import requests
from fastapi import APIRouter, Depends, FastAPI, File, Header, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .categorizer import Categorizer
from .config import configure_logging, load_config, load_cors_origins
from .currency import CurrencyConverter
from .database import SQLiteRepository
from .models import TransactionValidationError
from .services import ExpenseService
from .tips_service import FinanceTipsService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise shared services once and reuse them across requests."""

    config = load_config()
    configure_logging(config.log_level)
    repository = SQLiteRepository(config.database_file)
    repository.initialise_schema()
    expense_service = ExpenseService(
        config,
        repository,
        Categorizer(),
        CurrencyConverter(),
        FinanceTipsService(config),
    )

    app.state.config = config
    app.state.repository = repository
    app.state.expenses = expense_service
    logger.info("Expense tracker ready (database: %s)", config.database_file)

    yield

    repository.close()


app = FastAPI(lifespan=lifespan, title="expense tracker backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(load_cors_origins()),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-User-Id"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# Dependency injection ------------------------------------------------------

def get_expense_service(request: Request) -> ExpenseService:
    service: ExpenseService = request.app.state.expenses
    return service


def get_user_id(x_user_id: Annotated[Optional[str], Header()] = None) -> str:
    """Identity is established upstream; the header only names the owner."""

    return (x_user_id or "").strip() or "anonymous"


# Request bodies ------------------------------------------------------------


class ExpenseIn(BaseModel):
    date: str
    description: str
    amount: float | str
    mode: Optional[str] = None
    currency: Optional[str] = None


class BudgetIn(BaseModel):
    amount: float
    enabled: bool = True


class QuestionIn(BaseModel):
    question: str


# Routes --------------------------------------------------------------------

router = APIRouter(prefix="/api")


ServiceDep = Annotated[ExpenseService, Depends(get_expense_service)]
UserDep = Annotated[str, Depends(get_user_id)]


@router.get("/health")
def health_check() -> dict[str, str]:
    """Return a basic heartbeat payload for monitoring purposes."""

    return {"status": "ok"}


@router.post("/upload")
async def upload_statement(
    request: Request,
    expense_service: ServiceDep,
    user_id: UserDep,
    file: Annotated[UploadFile, File(description="CSV statement with Date,Description,Amount,Mode")],
) -> dict[str, object]:
    """Import a CSV statement and return the refreshed analytics."""

    filename = file.filename or ""
    if not (filename.lower().endswith(".csv") or file.content_type == "text/csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    limit = request.app.state.config.max_upload_bytes
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise HTTPException(status_code=413, detail="File exceeds the upload size limit")

    result = expense_service.import_csv(user_id, content)
    expenses = expense_service.list_expenses(user_id)
    return {
        "success": True,
        "message": (
            f"Successfully processed {len(result.transactions)} expenses "
            f"from {result.line_count} lines"
        ),
        "data": {
            "newExpenses": len(result.transactions),
            "totalExpenses": len(expenses),
            "analytics": expense_service.analytics(user_id),
            "errors": result.errors[:5],
        },
        "expenses": [tx.to_dict() for tx in expenses],
    }


@router.post("/expenses")
def add_expense(payload: ExpenseIn, expense_service: ServiceDep, user_id: UserDep) -> dict[str, object]:
    try:
        expense = expense_service.add_expense(
            user_id,
            payload.date,
            payload.description,
            payload.amount,
            mode=payload.mode,
            currency=payload.currency,
        )
    except TransactionValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return {
        "success": True,
        "message": "Expense added successfully",
        "expense": expense.to_dict(),
        "totalExpenses": len(expense_service.list_expenses(user_id)),
    }


@router.get("/expenses")
def list_expenses(expense_service: ServiceDep, user_id: UserDep) -> dict[str, object]:
    expenses = expense_service.list_expenses(user_id)
    return {
        "success": True,
        "expenses": [tx.to_dict() for tx in expenses],
        "totalExpenses": len(expenses),
    }


@router.delete("/expenses")
def clear_expenses(expense_service: ServiceDep, user_id: UserDep) -> dict[str, object]:
    deleted = expense_service.clear_expenses(user_id)
    return {"success": True, "message": f"Cleared {deleted} expenses", "totalExpenses": 0}


@router.delete("/expenses/{expense_id}")
def delete_expense(expense_id: str, expense_service: ServiceDep, user_id: UserDep) -> dict[str, object]:
    if not expense_service.delete_expense(user_id, expense_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    return {
        "success": True,
        "totalExpenses": len(expense_service.list_expenses(user_id)),
    }


@router.get("/analytics")
def analytics(
    expense_service: ServiceDep,
    user_id: UserDep,
    currency: Annotated[Optional[str], Query(pattern="^[A-Za-z]{3}$")] = None,
    top: Annotated[int, Query(ge=1, le=20)] = 5,
) -> dict[str, object]:
    return expense_service.analytics(user_id, currency, top)


@router.get("/settings/display-currency")
def get_display_currency(expense_service: ServiceDep, user_id: UserDep) -> dict[str, str]:
    return {"display_currency": expense_service.display_currency(user_id)}


@router.put("/settings/display-currency")
def set_display_currency(
    currency: Annotated[str, Query(pattern="^[A-Za-z]{3}$")],
    expense_service: ServiceDep,
    user_id: UserDep,
) -> dict[str, str]:
    try:
        code = expense_service.set_display_currency(user_id, currency)
    except TransactionValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"display_currency": code}


@router.get("/settings/budget")
def get_budget(expense_service: ServiceDep, user_id: UserDep) -> dict[str, object]:
    return expense_service.budget(user_id).to_dict()


@router.put("/settings/budget")
def set_budget(payload: BudgetIn, expense_service: ServiceDep, user_id: UserDep) -> dict[str, object]:
    try:
        status = expense_service.set_budget(user_id, payload.amount, payload.enabled)
    except TransactionValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return status.to_dict()


@router.post("/finance-bot")
def ask_finance_bot(payload: QuestionIn, expense_service: ServiceDep, user_id: UserDep) -> dict[str, str]:
    if not payload.question.strip():
        raise HTTPException(status_code=400, detail="Question must not be empty")
    try:
        answer = expense_service.ask_finance_bot(user_id, payload.question)
    except requests.RequestException as exc:
        logger.warning("Finance bot request failed: %s", exc)
        raise HTTPException(status_code=503, detail="Finance bot unavailable.") from exc
    if not answer:
        raise HTTPException(
            status_code=503,
            detail="Finance bot unavailable. Ensure the Gemini API key is configured.",
        )
    return {"answer": answer}


app.include_router(router)
