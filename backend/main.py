from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.database import create_db_and_tables
from core.logger import setup_logger
from contextlib import asynccontextmanager
from routes import admin, auth, employee
import os

setup_logger(level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Make sure the folder exists
os.makedirs(settings.upload_dir, exist_ok=True)

# Expose stored task images at /uploads
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")
app.include_router(auth.router)
app.include_router(employee.router, prefix="/employee")
app.include_router(admin.router, prefix="/admin")

@app.get("/", tags=["Test"])
def root():
    return {"message": "CCTV Task Tracker API running"}
