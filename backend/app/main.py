"""
Point d'entrée principal de l'API d'inscription Jana Ojana.
Démarrage : uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import init_db
from app.routers import admin, registrations, schools

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : crée les tables manquantes au démarrage."""
    logger.info("Démarrage de l'API (env=%s)", settings.ENV)
    init_db()
    yield


app = FastAPI(
    title="Jana Ojana Registration API",
    description="Inscriptions au concours de quiz inter-écoles et espace d'administration",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(registrations.router)
app.include_router(schools.router)
app.include_router(admin.router)


# Emplacements techniques retirés du champ "field" des erreurs
_LOCATION_PREFIXES = {"body", "query", "path", "header"}


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Toute erreur de validation (corps, formulaire, paramètres) → 400.
    detail reprend le premier message pour un affichage direct côté frontend.
    """
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
        errors.append({"field": ".".join(loc), "message": error.get("msg", "")})

    detail = errors[0]["message"] if errors else "Invalid request."
    return JSONResponse(status_code=400, content={"detail": detail, "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées (BDD, stockage) pour renvoyer
    un JSON 500 qui passe par CORSMiddleware.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal error occurred."},
    )


@app.get("/api/health", tags=["Santé"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "Jana Ojana Registration API", "version": "0.1.0"}
