import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, status
from app.core.db import init_db, close_db
from app.api.v1.orders import router as orders_router
from app.api.v1.cart import router as cart_router
from app.api.v1.outlets import router as outlets_router, restaurant_router
from app.api.v1.catalog import category_router, inventory_router
from app.api.v1.menu import router as menu_router
from app.api.v1.users import router as users_router
from app.core.config import LOG_LEVEL, PROJECT_NAME, VERSION
from app.core.exception_handlers import setup_exception_handlers
from app.realtime.notifier import SocketNotifier
from app.realtime.rooms import RoomManager
from app.realtime.socket import router as socket_router

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
log = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handles startup and shutdown events."""
    log.info(f"Starting {PROJECT_NAME} v{VERSION}...")
    await init_db() # Connect to DB and generate schemas
    yield
    await close_db()
    log.info(f"{PROJECT_NAME} stopped.")

app = FastAPI(
    title=PROJECT_NAME,
    version=VERSION,
    lifespan=lifespan,
    # Configure API documentation and paths
    docs_url="/docs",
    redoc_url="/redoc"
)

# Live socket rooms and the notifier the order lifecycle publishes through
app.state.rooms = RoomManager()
app.state.notifier = SocketNotifier(app.state.rooms)

# Include routers for modular API structure
app.include_router(orders_router, prefix="/api/v1/order", tags=["Orders"])
app.include_router(cart_router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(restaurant_router, prefix="/api/v1/restaurant", tags=["Restaurants"])
app.include_router(outlets_router, prefix="/api/v1/outlet", tags=["Outlets"])
app.include_router(category_router, prefix="/api/v1/category", tags=["Categories"])
app.include_router(inventory_router, prefix="/api/v1/inventory", tags=["Inventory"])
app.include_router(menu_router, prefix="/api/v1/item", tags=["Menu"])
app.include_router(users_router, prefix="/api/v1/user", tags=["Accounts"])
app.include_router(socket_router, tags=["Real-time"])


setup_exception_handlers(app)

@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    """Simple health check endpoint."""
    return {"status": "ok", "app_name": PROJECT_NAME, "connections": app.state.rooms.connection_count}
