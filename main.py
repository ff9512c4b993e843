# main.py
from dotenv import load_dotenv
load_dotenv()   # <-- Must be first!
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from config import load_cors_origins, load_settings
from models import GenerationRequest
from services.draft import ReplyGenerator

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

APP_NAME = "Email Reply Writer"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    client = httpx.AsyncClient(timeout=settings.request_timeout)
    app.state.settings = settings
    app.state.generator = ReplyGenerator(settings, client)
    logger.info("Started, drafting replies via %s", settings.gemini_api_url)
    try:
        yield
    finally:
        await client.aclose()
        logger.info("HTTP client closed")


app = FastAPI(title=APP_NAME, lifespan=lifespan)

# ------------- CORS -------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=load_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# ------------------------------------------------


def get_generator(request: Request) -> ReplyGenerator:
    return request.app.state.generator


@app.post("/api/email/generate", response_class=PlainTextResponse)
async def generate_email(
    body: GenerationRequest, generator: ReplyGenerator = Depends(get_generator)
):
    text = await generator.generate(body)
    return PlainTextResponse(text)


@app.post("/api/email/generate/result")
async def generate_email_result(
    body: GenerationRequest, generator: ReplyGenerator = Depends(get_generator)
):
    result = await generator.generate_result(body)
    return JSONResponse(result.model_dump(), status_code=200 if result.ok else 502)


@app.get("/")
def root():
    return {"status": "running", "app": APP_NAME}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)
