"""Helper functions for CLI commands."""

from pathlib import Path
from typing import Any

import click

from vectorstudio.constants import ALLOWED_UPLOAD_EXTENSIONS, CONTENT_PREVIEW_LENGTH
from vectorstudio.service.actions import StudioActions
from vectorstudio.service.errors import StudioError


def get_actions() -> StudioActions:
    """Build actions from the environment.

    Raises:
        click.Abort: If the vector store or embedding service cannot be set up
    """
    try:
        return StudioActions.from_env()
    except (StudioError, ValueError) as e:
        click.echo(f"✗ Error: {e}", err=True)
        click.echo("\nPlease ensure Chroma is running and accessible.", err=True)
        raise click.Abort()


def unwrap(result: dict[str, Any]) -> dict[str, Any]:
    """Return a successful envelope, or echo its error and abort.

    Raises:
        click.Abort: If the envelope reports failure
    """
    if result.get("success"):
        return result

    code = result.get("code")
    click.echo(f"✗ Error: {result.get('error', 'Unknown error')}", err=True)
    if code == "unavailable":
        click.echo("\nPlease ensure Chroma and the embedding service are running.", err=True)
    raise click.Abort()


def collect_files(paths: tuple[Path, ...]) -> list[Path]:
    """Expand directories into the supported files they contain.

    Files given explicitly are kept as-is so unsupported types surface as errors.
    """
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(
                sorted(
                    p
                    for p in path.iterdir()
                    if p.is_file() and p.suffix.lower().lstrip(".") in ALLOWED_UPLOAD_EXTENSIONS
                )
            )
        else:
            files.append(path)
    return files


def preview(content: str, max_length: int = CONTENT_PREVIEW_LENGTH) -> str:
    return content[:max_length] + "..." if len(content) > max_length else content


def format_search_result(index: int, result: dict, max_length: int = CONTENT_PREVIEW_LENGTH) -> str:
    """Format a search result for display.

    Args:
        index: Result number (1-based)
        result: Serialized QueryResult with pageContent, metadata and similarityScore
        max_length: Maximum content length before truncation

    Returns:
        Formatted string for display
    """
    metadata = result.get("metadata") or {}
    score = result.get("similarityScore")
    source = metadata.get("source", "unknown")
    chunk_idx = metadata.get("chunk_index", 0)
    score_text = f"{score}%" if score is not None else "n/a"

    lines = [
        f"{index}. [{source} - chunk #{chunk_idx}] (similarity: {score_text})",
        f"   id: {metadata.get('id', '')}",
        f"   {preview(result.get('pageContent', ''), max_length)}",
        "",
    ]
    return "\n".join(lines)


def format_collection(info: dict) -> str:
    """Format a serialized CollectionInfo as one display line."""
    metadata = info.get("metadata") or {}
    updated = metadata.get("updated", "unknown")
    return (
        f"  • {info['name']}: {info['count']} document(s), "
        f"dimension {info['dimension']}, updated {updated}"
    )
