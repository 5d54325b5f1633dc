from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import APP_NAME, APP_VERSION, CORS_ORIGINS, SERVER_HOST, SERVER_PORT
from app.db.database import close_database_connection, init_indexes, test_connection
from app.router.scheduling import router as scheduling_router
from app.router.system import router as system_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Test database connection
    print("🚀 Starting up Trip Date Consensus API...")
    if await test_connection():
        await init_indexes()
    yield
    # Shutdown: Close database connection
    print("🛑 Shutting down Trip Date Consensus API...")
    await close_database_connection()


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(system_router)
app.include_router(scheduling_router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)
