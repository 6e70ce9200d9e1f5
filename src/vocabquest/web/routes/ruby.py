"""Ruby markup endpoint."""

from fastapi import APIRouter

from vocabquest.core.ruby import accessibility_text, parse_ruby, reading_text
from vocabquest.web.schemas import RubyParseRequest, RubyParseResponse, RubySegmentResponse

router = APIRouter(prefix="/api/ruby", tags=["ruby"])


@router.post("/parse", response_model=RubyParseResponse)
async def parse(request: RubyParseRequest) -> RubyParseResponse:
    """Split ruby markup into display segments."""
    segments = parse_ruby(request.text)
    return RubyParseResponse(
        segments=[RubySegmentResponse.model_validate(s) for s in segments],
        plain_text="".join(s.text for s in segments),
        reading_text=reading_text(segments),
        accessibility_text=accessibility_text(segments),
    )
