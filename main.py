import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from sqlalchemy.orm import Session

import aggregation
import auth
import expenses as expense_service
from config import get_settings
from database import engine, get_db
from errors import AuthError, ExpenseTrackerError
from export import build_workbook, export_filename
from models import Base
from schemas import (
    ExpenseEnvelope,
    ExpenseIn,
    ExpenseListOut,
    ExpenseOut,
    ExpenseUpdate,
    LoginIn,
    MessageOut,
    ProfileOut,
    RegisterIn,
    SummaryOut,
    TokenOut,
    UserOut,
)
from security import get_current_user_id

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("expense-tracker")

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Expense Tracker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===== ERROR HANDLERS =====
@app.exception_handler(ExpenseTrackerError)
def handle_app_error(request: Request, exc: ExpenseTrackerError):
    headers = None
    if isinstance(exc, AuthError) and exc.status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message}, headers=headers)


@app.exception_handler(RequestValidationError)
def handle_request_validation(request: Request, exc: RequestValidationError):
    # report bad input as a plain 400 with the first problem found
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "path", "query"))
        message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


@app.exception_handler(Exception)
def handle_unexpected(request: Request, exc: Exception):
    # no exception is active here any more, so pass it explicitly
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error"},
    )


# ===== ROUTES =====
@app.get("/", response_model=MessageOut)
def home():
    return {"message": "Expense Tracker API running"}


@app.post("/api/register", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    auth.register_user(db, payload.name, payload.email, payload.password)
    return {"message": "User registered successfully"}


@app.post("/api/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    token = auth.authenticate_user(db, payload.email, payload.password)
    return {"message": "Login successful", "token": token}


@app.get("/api/profile", response_model=ProfileOut)
def profile(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    user = auth.get_profile(db, user_id)
    return {"message": "Profile fetched successfully", "user": UserOut.model_validate(user)}


@app.post("/api/expenses", response_model=ExpenseEnvelope, status_code=status.HTTP_201_CREATED)
def add_expense(payload: ExpenseIn, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    exp = expense_service.create_expense(db, user_id, payload.title, payload.amount, payload.category)
    return {"message": "Expense added successfully", "expense": ExpenseOut.model_validate(exp)}


@app.get("/api/expenses", response_model=ExpenseListOut)
def get_my_expenses(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    rows = expense_service.list_expenses(db, user_id)
    return {
        "message": "Expenses fetched successfully",
        "count": len(rows),
        "expenses": [ExpenseOut.model_validate(e) for e in rows],
    }


@app.get("/api/expenses/summary", response_model=SummaryOut)
def expense_summary(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rows = expense_service.list_expenses(db, user_id)
    summary = aggregation.summarize(rows, category)
    return {"message": "Summary computed successfully", **summary}


@app.get("/api/expenses/export")
def export_excel(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    rows = aggregation.filter_by_category(expense_service.list_expenses(db, user_id), category)
    stream = build_workbook(rows)

    return StreamingResponse(
        stream,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={
            "Content-Disposition": f"attachment; filename={export_filename(category)}"
        },
    )


@app.put("/api/expenses/{expense_id}", response_model=ExpenseEnvelope)
def update_expense(
    expense_id: int,
    payload: ExpenseUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    exp = expense_service.update_expense(db, user_id, expense_id, payload.changes())
    return {"message": "Expense updated successfully", "expense": ExpenseOut.model_validate(exp)}


@app.delete("/api/expenses/{expense_id}", response_model=MessageOut)
def delete_expense(expense_id: int, db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    expense_service.delete_expense(db, user_id, expense_id)
    return {"message": "Expense deleted successfully"}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port)
