from contextlib import asynccontextmanager
from typing import List, Optional
import logging

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from lensmatch.collectors.zip_dataset import ZipDatasetLoader
from lensmatch.core.photographer_filter import filter_profiles
from lensmatch.core.zip_search import ZipSearchEngine
from lensmatch.models.photographer import FilterConfig, ProfileRecord


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize components
search_engine = ZipSearchEngine(ZipDatasetLoader())


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Search falls back to the full dataset if this fails
    await search_engine.loader.initialize()
    yield


# Initialize FastAPI app
app = FastAPI(
    title="LensMatch Search API",
    description="Zip/city autocomplete and photographer filtering for the marketplace",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Pydantic models for API
class ZipResult(BaseModel):
    type: str = Field(..., description="'zip' for a single record, 'city' for an aggregate")
    city: str
    state: str
    display_name: str
    latitude: float
    longitude: float
    zip: Optional[str] = None
    state_name: Optional[str] = None
    population: Optional[int] = None
    representative_population: Optional[int] = None
    all_zips: Optional[List[str]] = None


class ProfileModel(BaseModel):
    id: str
    bio: str = ""
    display_name: str = "Photographer"
    specialties: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=lambda: ["English"])
    years_experience: int = 0
    hourly_rate: float = 0
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    average_rating: float = 0
    total_reviews: int = 0
    total_bookings: int = 0
    portfolio_images: List[str] = Field(default_factory=list)


class PhotographerFilterRequest(BaseModel):
    profiles: List[ProfileModel]
    rating: float = Field(0, ge=0, le=5, description="Minimum rating, 0 for any")
    priceRange: str = Field("all", description="Range tag such as '150-300' or '500+'")
    specialties: List[str] = Field(default_factory=list)
    languages: List[str] = Field(default_factory=list)
    zip: str = Field("", description="City or state text")


class PhotographerFilterResponse(BaseModel):
    total: int
    matched: int
    active_filters: int
    profiles: List[ProfileModel]


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "name": "LensMatch Search API",
        "version": "1.0.0",
        "endpoints": {
            "/zips/search": "Zip code or city autocomplete",
            "/zips/{zip_code}": "Validate a 5-digit zip code",
            "/photographers/filter": "Filter photographer listings",
            "/health": "Dataset status",
            "/docs": "API documentation"
        }
    }


@app.get("/health")
async def health():
    zip_loader = search_engine.loader
    return {
        "status": "healthy" if not zip_loader.error else "degraded",
        "quick_dataset": search_engine.is_ready,
        "loading": zip_loader.is_loading,
        "full_dataset": zip_loader.is_full_loaded,
        "error": zip_loader.error,
    }


@app.get("/zips/search", response_model=List[ZipResult])
async def search_zips(q: str = Query("", description="Zip prefix or city name")):
    """
    Autocomplete by zip prefix or city name
    """
    try:
        results = await search_engine.search(q)
        return [ZipResult(**result.to_dict()) for result in results]

    except Exception as e:
        logger.error(f"Zip search error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/zips/{zip_code}", response_model=ZipResult)
async def get_zip(zip_code: str):
    """
    Look up an exact 5-digit zip code
    """
    try:
        record = await search_engine.validate_zip_code(zip_code)
        if not record:
            raise HTTPException(status_code=404, detail="Zip code not found")

        return ZipResult(**record.to_dict())

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Zip lookup error for {zip_code}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/photographers/filter", response_model=PhotographerFilterResponse)
async def filter_photographers(request: PhotographerFilterRequest):
    """
    Narrow a photographer listing by rating, price, specialties, languages and location
    """
    try:
        config = FilterConfig.from_ui(
            rating=request.rating,
            price_range=request.priceRange,
            specialties=request.specialties,
            languages=request.languages,
            zip=request.zip,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    profiles = [ProfileRecord(**profile.model_dump()) for profile in request.profiles]
    filtered = filter_profiles(profiles, config)
    logger.info(f"Filtered {len(profiles)} photographers to {len(filtered)}")

    return PhotographerFilterResponse(
        total=len(profiles),
        matched=len(filtered),
        active_filters=config.active_count,
        profiles=[ProfileModel(**profile.to_dict()) for profile in filtered],
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
