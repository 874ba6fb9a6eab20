"""FastAPI server for ingredient extraction."""

from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, field_validator

from ingredient_engine.data_layer.lexicon import LANGUAGE_HINTS, LANG_AUTO
from ingredient_engine.ingestion.ingredient_parser import IngredientParser
from ingredient_engine.output.formatters import format_list_json


app = FastAPI(title="Ingredient Extraction API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Local development
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

parser = IngredientParser()


def _normalize_language(value: str) -> str:
    normalized = value.strip().lower()
    if normalized not in LANGUAGE_HINTS:
        raise ValueError(f"language must be one of {', '.join(LANGUAGE_HINTS)}")
    return normalized


class ParseRequest(BaseModel):
    text: str = Field(default="", description="Raw OCR text, one ingredient per line")
    language: str = LANG_AUTO

    @field_validator("language")
    @classmethod
    def check_language(cls, value: str) -> str:
        return _normalize_language(value)


class ParseLineRequest(BaseModel):
    line: str
    language: str = LANG_AUTO

    @field_validator("language")
    @classmethod
    def check_language(cls, value: str) -> str:
        return _normalize_language(value)


@app.post("/api/parse")
def parse_text(request: ParseRequest) -> Dict[str, Any]:
    result = parser.parse(request.text, request.language)
    return format_list_json(result)


@app.post("/api/parse/line")
def parse_line(request: ParseLineRequest) -> Dict[str, Any]:
    return parser.parse_line(request.line, request.language).to_dict()


def main(host: str = "127.0.0.1", port: int = 8000, log_level: Optional[str] = "info"):
    uvicorn.run(app, host=host, port=port, log_level=log_level)


if __name__ == "__main__":
    main()
