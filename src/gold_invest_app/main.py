import os
import logging
from dotenv import load_dotenv

# Load environment variables before the app modules read them
load_dotenv()

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from gold_invest_app.db import lifespan
from gold_invest_app.core.exceptions_handler.http_exception_handler import http_exception_handler
from gold_invest_app.core.exceptions_handler.global_exception_handler import global_exception_handler
from gold_invest_app.core.exceptions_handler.validation_exception_handler import validation_exception_handler
from gold_invest_app.users.routers.auth_routers import router as auth_router
from gold_invest_app.users.routers.user_routers import user_router
from gold_invest_app.users.utils.kyc_storage import UPLOAD_DIR
from gold_invest_app.admin.routers import router as admin_router
from gold_invest_app.gold.routers.gold_routers import router as gold_router
from gold_invest_app.finance.routers.investment_routers import router as investment_router
from gold_invest_app.finance.routers.finance import router as finance_router

APP_ENV = os.getenv("APP_ENV", "development")
PORT = int(os.getenv("PORT", "5000"))
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5000").split(",")
    if origin.strip()
]

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(
    title="Gold Invest API",
    description="Gold investment platform with KYC review, built on FastAPI with Beanie and Motor",
    version="1.0.0",
    lifespan=lifespan
)

# Unhandled error messages are echoed to clients outside production
app.state.expose_errors = APP_ENV != "production"

if not os.path.exists(UPLOAD_DIR):
    os.makedirs(UPLOAD_DIR)

app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR), name="uploads")


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/test")
def read_root():
    return {"msg": "API is working"}


app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)


app.include_router(auth_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(gold_router, prefix="/api")
app.include_router(investment_router, prefix="/api")
app.include_router(finance_router, prefix="/api")


def run():
    import uvicorn

    uvicorn.run("gold_invest_app.main:app", host="0.0.0.0", port=PORT, reload=APP_ENV != "production")


if __name__ == "__main__":
    run()
