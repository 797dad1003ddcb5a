from fastapi import APIRouter, HTTPException
from cropadvisor.engine.crops import CROPS, get_crop
from cropadvisor.engine.models import CropRequirement
from cropadvisor.schema import CropListResponse

router = APIRouter()

@router.get("/", response_model=CropListResponse, summary="List the crop catalog")
def list_crops():
    return {"items": list(CROPS)}

@router.get("/{crop_id}", response_model=CropRequirement, summary="Get one crop profile")
def crop_detail(crop_id: str):
    crop = get_crop(crop_id)
    if crop is None:
        raise HTTPException(404, "Unknown crop")
    return crop
