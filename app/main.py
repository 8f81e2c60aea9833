import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.db.couchdb import close_couch, open_couch
from app.errors import install_error_handlers
from app.routers import categories, images, posts, tags
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Blog CMS API", description="Posts, tags and categories")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.couch = open_couch()
    logger.info("CouchDB connection opened")

    try:
        yield
    finally:
        close_couch(app.state.couch)
        logger.info("CouchDB connection closed")


app.router.lifespan_context = lifespan

install_error_handlers(app)

app.include_router(posts.router, prefix="/api")
app.include_router(tags.router, prefix="/api")
app.include_router(categories.router, prefix="/api")
app.include_router(images.router)


@app.get("/")
async def root():
    return {"message": "Blog CMS API is running"}
