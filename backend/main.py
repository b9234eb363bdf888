# backend/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db
from errors import StorefrontError
from utils.pdf import ensure_storage_dir, STORAGE_DIR

# Router imports (they also register every model on Base.metadata)
from routes.cart import router as cart_router
from routes.orders import router as orders_router
from routes.admin import router as admin_router
from routes.ordering_window import router as ordering_window_router

# Initialization
init_db()

app = FastAPI(title="Sushi Storefront API", version="1.0.0")

# Rendered invoices are served as static files
ensure_storage_dir()
app.mount(settings.INVOICE_URL_PREFIX, StaticFiles(directory=str(STORAGE_DIR)), name="invoices")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain errors carry their own HTTP status
@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Router registration
app.include_router(cart_router)
app.include_router(orders_router)
app.include_router(admin_router)
app.include_router(ordering_window_router)

@app.get("/")
def read_root():
    return {"message": "Sushi Storefront API is running"}
