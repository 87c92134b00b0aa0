import logging
import os
import sys

# ── Exclude virtualenvs from uvicorn --reload watcher ──
if "--reload" in sys.argv or os.environ.get("UVICORN_RELOAD"):
    os.environ.setdefault("WATCHFILES_IGNORE_DIRS", ".venv,__pycache__,node_modules")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# -------- ROUTERS --------
from routers.verify_routes import router as verify_router

app = FastAPI(
    title="ID Document Verification Backend",
    description="Verifies a claimed identity against text recognised from a PAN or Aadhaar card",
    version="1.0.0",
)

# -------- CORS --------
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000,http://127.0.0.1:5173",
    ).split(",")
    if o.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------- REGISTER ROUTERS --------
app.include_router(verify_router)


# -------- ROOT HEALTH CHECK --------

@app.get("/")
def root():
    return {
        "status": "running",
        "service": "ID Document Verification Backend"
    }
