import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from annotator.config import settings
from annotator.core.exceptions import HierarchyError
from annotator.api.labels.routes import router as labels_router
from annotator.api.annotations.routes import router as annotations_router
from annotator.api.analytics.routes import router as analytics_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info("Annotator API starting (env=%s)", settings.ENV)
    yield

app = FastAPI(lifespan=lifespan)

# Routers
app.include_router(labels_router, prefix="/labels", tags=["Labels"])
app.include_router(annotations_router, prefix="/annotations", tags=["Annotations"])
app.include_router(analytics_router, prefix="/analytics", tags=["Analytics"])


@app.exception_handler(HierarchyError)
async def hierarchy_error_handler(request: Request, exc: HierarchyError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/ping")
def ping():
    return {"message": "pong"}
