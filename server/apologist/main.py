from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from apologist.api.routes import router
from apologist.core.config import settings
from apologist.core.logging import setup_logging

setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title="Apologist API",
    description="Christian apologetics RAG API using LangChain and ChromaDB",
    version="1.0.0",
)

# CORS middleware for Next.js frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Apologist RAG API"}
