import logging
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.config import configure_logging
from app.database import Base, engine
from app.models import coupon, order, product  # noqa: F401  (register tables)
from app.routers import cart as cart_router
from app.routers import coupons as coupons_router
from app.routers import orders as orders_router
from app.routers import products as products_router

configure_logging()
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Storefront Orders API",
    description="Cart pricing, coupon validation and order status workflow for an e-commerce storefront",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS - keep permissive for demo; restrict in prod
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cart_router.router)
app.include_router(coupons_router.router)
app.include_router(products_router.router)
app.include_router(orders_router.router)


@app.get("/health")
def health():
    return {"status": "healthy"}


# Proper JSON error with correct status code
@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    error = {"status_code": exc.status_code, "detail": exc.detail}
    kind = getattr(exc, "kind", None)
    if kind is not None:
        error["kind"] = kind.value
    return JSONResponse(status_code=exc.status_code, content={"error": error})


# Infrastructure failures: log everything, tell the client nothing
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": {"status_code": 500, "detail": "Something went wrong. Please try again."}},
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
