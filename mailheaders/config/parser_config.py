"""Configuration models for the header parser."""

from typing import Dict

from pydantic import BaseModel, Field, field_validator

from mailheaders.models.behavior import Behavior


class ParserConfig(BaseModel):
    """Settings threaded through every grammar production of a parse call."""

    max_comment_depth: int = 10
    allow_utf8: bool = True
    decode_quoted_encoded_words: bool = True
    charset_aliases: Dict[str, str] = Field(default_factory=dict)
    idna_uts46: bool = True

    @field_validator("max_comment_depth")
    def validate_depth(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_comment_depth must be positive")
        return v

    @field_validator("charset_aliases")
    def normalize_aliases(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {label.strip().lower(): name.strip() for label, name in v.items()}


class AppConfig(BaseModel):
    """Main application configuration."""

    schema_version: str = "1.0"
    default_behavior: Behavior = Behavior.OBSOLETE
    output_indent: int = 2
    parser: ParserConfig = Field(default_factory=ParserConfig)

    @field_validator("schema_version")
    def validate_schema_version(cls, v: str) -> str:
        if not v:
            raise ValueError("schema_version is required")
        return v
