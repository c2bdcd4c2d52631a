from fastapi import APIRouter, Depends, HTTPException, status
from shortlink_app.exceptions import HashSpaceExhaustedError, ShortLinkNotFoundError
from shortlink_app.schemas.link import ShortLinkCreate, ShortLinkResponse
from shortlink_app.services.shortener_service import ShortenerService
from shortlink_app.dependencies import get_shortener_service

router = APIRouter(prefix="/links", tags=["links"])


@router.post("/", response_model=ShortLinkResponse, status_code=status.HTTP_201_CREATED)
def create_short_link(
    link_data: ShortLinkCreate,
    shortener: ShortenerService = Depends(get_shortener_service)
):
    """Create a short link with a fresh hash"""
    try:
        return shortener.create(
            str(link_data.url),
            expires_at=link_data.expires_at,
            relation_type=link_data.relation_type,
            relation_id=link_data.relation_id,
        )
    except HashSpaceExhaustedError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )


@router.get("/{hash}", response_model=ShortLinkResponse)
def get_short_link(
    hash: str,
    shortener: ShortenerService = Depends(get_shortener_service)
):
    """Get a live short link"""
    try:
        return shortener.get_link(hash)
    except ShortLinkNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found"
        )
