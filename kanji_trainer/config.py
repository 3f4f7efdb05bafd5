"""
Runtime settings for the writing practice engine.

Values come from the environment (or a local .env file) so the reference
stroke data source can be pointed at a mirror without code changes.
"""
import os
from pydantic import BaseModel, Field
from dotenv import load_dotenv

DEFAULT_STROKE_DATA_URL = "https://cdn.jsdelivr.net/npm/hanzi-writer-data@2.0/{character}.json"


class Settings(BaseModel):
    stroke_data_url: str = DEFAULT_STROKE_DATA_URL  # must contain {character}
    stroke_data_timeout: float = Field(default=5.0, gt=0)  # seconds
    canvas_width: int = Field(default=400, gt=0)
    canvas_height: int = Field(default=400, gt=0)

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            stroke_data_url=os.getenv("KANJI_STROKE_DATA_URL", DEFAULT_STROKE_DATA_URL),
            stroke_data_timeout=float(os.getenv("KANJI_STROKE_DATA_TIMEOUT", "5.0")),
            canvas_width=int(os.getenv("KANJI_CANVAS_WIDTH", "400")),
            canvas_height=int(os.getenv("KANJI_CANVAS_HEIGHT", "400")),
        )
