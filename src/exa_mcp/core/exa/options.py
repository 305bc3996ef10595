"""Content extraction options shared by the search, contents and similar tools.

Several Exa options accept either a boolean switch or a configuration
object (``text``, ``highlights``, ``summary``). Tool signatures type them as
``bool | <Options>`` and the builders below turn either branch into the
camelCase request fragment the API expects.
"""

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field

DEFAULT_NUM_RESULTS = 5
DEFAULT_MAX_CHARACTERS = 3000
DEFAULT_HIGHLIGHT_SENTENCES = 3

Category = Literal[
    "company",
    "research paper",
    "news",
    "pdf",
    "github",
    "tweet",
    "personal site",
    "linkedin profile",
    "financial report",
]

ContentsLivecrawl = Literal["always", "fallback", "never"]
Livecrawl = Literal["always", "fallback", "preferred", "never"]


class TextOptions(BaseModel):
    """Full-text extraction settings."""

    max_characters: Optional[int] = Field(
        default=None, description="Maximum characters to extract (default: 3000)"
    )
    include_html_tags: Optional[bool] = Field(
        default=None, description="Include HTML tags in extracted text"
    )


class HighlightsOptions(BaseModel):
    """Key-sentence extraction settings."""

    num_sentences: Optional[int] = Field(
        default=None, description="Number of highlight sentences (default: 3)"
    )
    highlights_per_url: Optional[int] = Field(
        default=None, description="Number of highlights per URL"
    )
    query: Optional[str] = Field(default=None, description="Query to guide highlight extraction")


class SummaryOptions(BaseModel):
    """AI summary settings."""

    query: Optional[str] = Field(default=None, description="Query to guide summary generation")


class SubpagesOptions(BaseModel):
    """Linked-page crawling settings."""

    max: Optional[int] = Field(default=None, description="Maximum subpages to crawl per URL (default: 0)")
    include_patterns: Optional[list[str]] = Field(
        default=None, description="URL patterns to include (e.g., 'blog/*', '*/about')"
    )
    exclude_patterns: Optional[list[str]] = Field(
        default=None, description="URL patterns to exclude"
    )


class ExtrasOptions(BaseModel):
    """Additional metadata extraction settings."""

    links: Optional[bool] = Field(default=None, description="Extract all links from the page")
    image_links: Optional[bool] = Field(
        default=None, description="Extract all image links from the page"
    )


class ContentsOptions(BaseModel):
    """Content extraction settings attached to search-style requests."""

    text: Optional[Union[bool, TextOptions]] = Field(
        default=None, description="Extract full text content"
    )
    highlights: Optional[Union[bool, HighlightsOptions]] = Field(
        default=None, description="Extract relevant text snippets"
    )
    summary: Optional[Union[bool, SummaryOptions]] = Field(
        default=None, description="Generate AI summaries of content"
    )
    livecrawl: Optional[Livecrawl] = Field(
        default=None, description="Live crawling behavior (default: preferred)"
    )
    subpages: Optional[SubpagesOptions] = Field(default=None, description="Crawl and include subpages")
    extras: Optional[ExtrasOptions] = Field(default=None, description="Additional metadata to extract")


def build_text_option(
    value: Union[bool, TextOptions, None],
    default_max_characters: int = DEFAULT_MAX_CHARACTERS,
) -> Union[bool, dict[str, Any]]:
    """Build the ``text`` fragment; unset means text with the default length."""
    if value is None:
        return {"maxCharacters": default_max_characters}
    if isinstance(value, bool):
        return value
    fragment: dict[str, Any] = {
        "maxCharacters": value.max_characters or default_max_characters,
    }
    if value.include_html_tags is not None:
        fragment["includeHtmlTags"] = value.include_html_tags
    return fragment


def build_highlights_option(
    value: Union[bool, HighlightsOptions, None],
) -> Union[bool, dict[str, Any], None]:
    """Build the ``highlights`` fragment, or None when unset."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    fragment: dict[str, Any] = {
        "numSentences": value.num_sentences or DEFAULT_HIGHLIGHT_SENTENCES,
    }
    if value.highlights_per_url:
        fragment["highlightsPerUrl"] = value.highlights_per_url
    if value.query:
        fragment["query"] = value.query
    return fragment


def build_summary_option(
    value: Union[bool, SummaryOptions, None],
) -> Union[bool, dict[str, Any], None]:
    """Build the ``summary`` fragment, or None when unset."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    fragment: dict[str, Any] = {}
    if value.query:
        fragment["query"] = value.query
    return fragment


def build_subpages_option(value: Optional[SubpagesOptions]) -> Optional[dict[str, Any]]:
    if value is None:
        return None
    fragment: dict[str, Any] = {"max": value.max or 0}
    if value.include_patterns:
        fragment["includePatterns"] = value.include_patterns
    if value.exclude_patterns:
        fragment["excludePatterns"] = value.exclude_patterns
    return fragment


def build_extras_option(value: Optional[ExtrasOptions]) -> Optional[dict[str, Any]]:
    if value is None:
        return None
    fragment: dict[str, Any] = {}
    if value.links is not None:
        fragment["links"] = value.links
    if value.image_links is not None:
        fragment["imageLinks"] = value.image_links
    return fragment


def build_content_fields(
    *,
    text: Union[bool, TextOptions, None] = None,
    highlights: Union[bool, HighlightsOptions, None] = None,
    summary: Union[bool, SummaryOptions, None] = None,
    livecrawl: Optional[str] = None,
    subpages: Optional[SubpagesOptions] = None,
    extras: Optional[ExtrasOptions] = None,
    default_livecrawl: str = "preferred",
) -> dict[str, Any]:
    """Assemble the content-extraction fields of a request body.

    ``text`` is always present; ``livecrawl`` falls back to
    ``default_livecrawl``; the remaining fields appear only when set.
    """
    fields: dict[str, Any] = {"text": build_text_option(text)}

    optional = {
        "highlights": build_highlights_option(highlights),
        "summary": build_summary_option(summary),
    }
    fields.update({k: v for k, v in optional.items() if v is not None})

    fields["livecrawl"] = livecrawl or default_livecrawl

    subpages_fragment = build_subpages_option(subpages)
    if subpages_fragment is not None:
        fields["subpages"] = subpages_fragment
    extras_fragment = build_extras_option(extras)
    if extras_fragment is not None:
        fields["extras"] = extras_fragment

    return fields


def build_contents_option(
    contents: Optional[ContentsOptions],
    *,
    default_livecrawl: str = "preferred",
) -> dict[str, Any]:
    """Build the nested ``contents`` object of a search-style request."""
    if contents is None:
        return {
            "text": {"maxCharacters": DEFAULT_MAX_CHARACTERS},
            "livecrawl": default_livecrawl,
        }
    return build_content_fields(
        text=contents.text,
        highlights=contents.highlights,
        summary=contents.summary,
        livecrawl=contents.livecrawl,
        subpages=contents.subpages,
        extras=contents.extras,
        default_livecrawl=default_livecrawl,
    )


def compact(**fields: Any) -> dict[str, Any]:
    """Drop unset (None) and empty-list fields from a request body."""
    return {k: v for k, v in fields.items() if v is not None and v != []}
