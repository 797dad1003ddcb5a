import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from cropadvisor.config import settings
from cropadvisor.catalog import router as catalog_router
from cropadvisor.schema import ProviderRecommendRequest, ProviderRecommendResponse, RecommendRequest, RecommendResponse
from cropadvisor.engine.scorer import recommend as recommend_crops
from cropadvisor.sources import build_input, weather_alerts

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, version="0.1.0")
app.state.settings = settings

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins, allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"]
)

@app.get("/health")
def health():
    return {"ok": True}

app.include_router(catalog_router, prefix="/crops", tags=["Crops"])

@app.post("/recommend", response_model=RecommendResponse)
def recommend(body: RecommendRequest):
    items = recommend_crops(body, top_n=body.top_n, debug=body.debug)
    logger.info("recommend: %d items, top=%s", len(items), items[0].id if items else None)
    return {"items": items}

@app.post("/recommend/providers", response_model=ProviderRecommendResponse)
def recommend_from_providers(body: ProviderRecommendRequest):
    inp = build_input(body.soil, body.hourly, body.rainfall_last_24h, body.now)
    if not inp.forecast:
        logger.warning("recommend/providers: no forecast rows, temperature and rainfall will be unknown")
    items = recommend_crops(inp, top_n=body.top_n, debug=body.debug)
    alerts = weather_alerts(inp.forecast, body.precipitation_last_hour, now=inp.now)
    if alerts:
        logger.info("recommend/providers: %d weather alerts (%s)", len(alerts), ", ".join(a.id for a in alerts))
    return {"items": items, "alerts": alerts}
