from __future__ import annotations

import logging

from fastapi import FastAPI
from pydantic import BaseModel, Field

from . import config
from .core import parse
from .core.classifier import UrlClassifier
from .core.preview import PreviewResolver
from .core.registry import load_registry

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Link Guard")

classifier = UrlClassifier(load_registry(config.PLATFORMS_FILE, config.BLOCKLIST_FILE))
resolver = PreviewResolver(classifier=classifier)
logger.info(
    "Registry ready: %d platforms, %d blocked domains",
    len(classifier.registry.platforms),
    len(classifier.registry.blocked_domains),
)


class UrlRequest(BaseModel):
    url: str


class PreviewsRequest(BaseModel):
    urls: list[str] = Field(default_factory=list)
    text: str | None = None


@app.post("/api/classify")
def classify(payload: UrlRequest):
    verdict = classifier.screen(payload.url)
    return {
        "url": payload.url,
        "normalized_url": classifier.normalize(payload.url),
        "valid": classifier.is_valid_url(payload.url),
        "malicious": verdict.malicious,
        "reason": verdict.reason,
        **classifier.identify_platform(payload.url).to_dict(),
        "username": classifier.extract_username(payload.url),
        "embed_url": classifier.get_embed_url(payload.url),
        "sanitized_url": classifier.sanitize_url(payload.url),
    }


@app.post("/api/sanitize")
def sanitize(payload: UrlRequest):
    return {"url": payload.url, "sanitized_url": classifier.sanitize_url(payload.url)}


@app.post("/api/preview")
async def preview(payload: UrlRequest):
    result = await resolver.resolve(payload.url)
    return result.to_dict()


@app.post("/api/previews")
async def previews(payload: PreviewsRequest):
    urls = list(payload.urls)
    if payload.text:
        urls.extend(parse.extract_urls(payload.text))
    results = await resolver.resolve_many(urls)
    return {"previews": {url: result.to_dict() for url, result in results.items()}}


@app.get("/api/platforms")
def platforms():
    return {
        "platforms": [
            {"name": entry.name, "domain": entry.domain, "icon": entry.icon}
            for entry in classifier.registry.platforms
        ]
    }
