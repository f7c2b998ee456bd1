"""Command-line interface for Vector Studio using Click."""

import json
from pathlib import Path

import click
from dotenv import load_dotenv

from vectorstudio.client.cli_helpers import (
    collect_files,
    format_collection,
    format_search_result,
    get_actions,
    preview,
    unwrap,
)
from vectorstudio.constants import (
    DEFAULT_DIMENSION,
    DEFAULT_INGEST_CHUNK_OVERLAP,
    DEFAULT_INGEST_CHUNK_SIZE,
    DEFAULT_TOP_K,
    PROCESSING_METHODS,
)

# Load environment variables
load_dotenv()


def parse_metadata(ctx: click.Context, param: click.Parameter, value: str | None) -> dict | None:
    """Click callback turning a JSON object option into a dict."""
    if value is None:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object")
    return parsed


@click.group()
def cli() -> None:
    """Manage Chroma collections and documents from the command line."""


@cli.command("collections")
def list_collections() -> None:
    """List all collections with their document counts.

    Example:
        vectorstudio collections
    """
    result = unwrap(get_actions().list_collections())
    if not result["data"]:
        click.echo("No collections found.")
        return

    click.echo(f"📂 {len(result['data'])} collection(s):")
    for info in result["data"]:
        click.echo(format_collection(info))


@cli.command()
@click.argument("name")
@click.option(
    "--dimension",
    type=int,
    default=DEFAULT_DIMENSION,
    help=f"Embedding dimension recorded on the collection (default: {DEFAULT_DIMENSION})",
)
def create(name: str, dimension: int) -> None:
    """Create the collection NAME.

    Example:
        vectorstudio create papers --dimension 768
    """
    result = unwrap(get_actions().create_collection(name, dimension))
    click.echo(f"✓ Collection '{result['data']['name']}' created")


@cli.command()
@click.argument("name")
def info(name: str) -> None:
    """Show document count, dimension and metadata of collection NAME."""
    data = unwrap(get_actions().get_collection_info(name))["data"]
    click.echo(f"📊 Collection '{data['name']}'")
    click.echo(f"   Documents: {data['count']}")
    click.echo(f"   Dimension: {data['dimension']}")
    for key, value in sorted(data["metadata"].items()):
        click.echo(f"   {key}: {value}")


@cli.command("delete-collection")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation prompt")
def delete_collection(name: str, yes: bool) -> None:
    """Delete collection NAME and all its documents.

    WARNING: This is irreversible and deletes all documents and embeddings.

    Example:
        vectorstudio delete-collection papers          # Will prompt for confirmation
        vectorstudio delete-collection papers --yes    # Skip confirmation
    """
    actions = get_actions()

    if not yes:
        click.echo(f"⚠️  WARNING: You are about to delete the collection '{name}'")
        click.echo("This will permanently delete all of its documents and embeddings.\n")
        if not click.confirm("Are you sure you want to proceed?", default=False):
            click.echo("Deletion cancelled.")
            return

    click.echo(f"🗑️  Deleting collection '{name}'...")
    unwrap(actions.delete_collection(name))
    click.echo(f"✓ Collection '{name}' successfully deleted!")


@cli.command()
@click.argument("collection")
def documents(collection: str) -> None:
    """List the documents stored in COLLECTION."""
    data = unwrap(get_actions().get_all_documents(collection))["data"]
    if not data:
        click.echo(f"Collection '{collection}' is empty.")
        return

    click.echo(f"📄 {len(data)} document(s) in '{collection}':\n")
    for doc in data:
        metadata = doc["metadata"]
        click.echo(f"- {metadata.get('id')} [{metadata.get('source', 'unknown')}]")
        click.echo(f"  {preview(doc['pageContent'])}")


@cli.command()
@click.argument("collection")
@click.argument("content")
@click.option(
    "--metadata",
    callback=parse_metadata,
    default=None,
    help='Metadata as a JSON object, e.g. \'{"author": "Ada"}\'',
)
def add(collection: str, content: str, metadata: dict | None) -> None:
    """Add CONTENT to COLLECTION as a single document.

    Example:
        vectorstudio add papers "Entanglement links particle states."
    """
    result = unwrap(
        get_actions().add_document(collection, {"content": content, "metadata": metadata})
    )
    click.echo(f"✓ Added document {result['id']}")


@cli.command()
@click.argument("collection")
@click.argument("doc_id")
@click.argument("content")
def update(collection: str, doc_id: str, content: str) -> None:
    """Replace the content of document DOC_ID in COLLECTION."""
    unwrap(get_actions().update_document(collection, doc_id, content))
    click.echo(f"✓ Updated document {doc_id}")


@cli.command("delete-document")
@click.argument("collection")
@click.argument("doc_id")
def delete_document(collection: str, doc_id: str) -> None:
    """Delete document DOC_ID from COLLECTION."""
    unwrap(get_actions().delete_document(collection, doc_id))
    click.echo(f"✓ Deleted document {doc_id}")


@cli.command()
@click.argument("collection")
@click.argument("query", type=str)
@click.option(
    "--top-k", type=int, default=DEFAULT_TOP_K, help="Number of results to return (default: 5)"
)
@click.option("--related", is_flag=True, default=False, help="Also show related documents")
@click.option(
    "--where",
    callback=parse_metadata,
    default=None,
    help='Metadata filter as a JSON object, e.g. \'{"source": "paper.pdf"}\'',
)
def search(collection: str, query: str, top_k: int, related: bool, where: dict | None) -> None:
    """Search COLLECTION for documents similar to QUERY.

    Example:
        vectorstudio search papers "quantum mechanics"
        vectorstudio search papers "machine learning" --top-k 3 --related
    """
    click.echo(f"🔍 Searching '{collection}' for: '{query}'")
    click.echo(f"   Returning top {top_k} results...\n")

    result = unwrap(
        get_actions().query_collection(
            collection, query, k=top_k, where=where, include_related=related
        )
    )

    if not result["data"]:
        click.echo("No results found.")
        return

    click.echo(f"✅ Found {len(result['data'])} result(s):\n")
    for i, item in enumerate(result["data"], 1):
        click.echo(format_search_result(i, item))

    if result.get("related"):
        click.echo(f"🔗 {len(result['related'])} related document(s):\n")
        for i, item in enumerate(result["related"], 1):
            click.echo(format_search_result(i, item))


@cli.command()
@click.argument("collection")
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--chunk-size",
    type=int,
    default=DEFAULT_INGEST_CHUNK_SIZE,
    help=f"Characters per chunk (default: {DEFAULT_INGEST_CHUNK_SIZE})",
)
@click.option(
    "--chunk-overlap",
    type=int,
    default=DEFAULT_INGEST_CHUNK_OVERLAP,
    help=f"Characters shared by consecutive chunks (default: {DEFAULT_INGEST_CHUNK_OVERLAP})",
)
@click.option(
    "--method",
    type=click.Choice(list(PROCESSING_METHODS)),
    default="default",
    help="Processing method recorded on each chunk",
)
def ingest(
    collection: str,
    paths: tuple[Path, ...],
    chunk_size: int,
    chunk_overlap: int,
    method: str,
) -> None:
    """Ingest files (or every supported file in a directory) into COLLECTION.

    Example:
        vectorstudio ingest papers documents/
        vectorstudio ingest papers notes.md paper.pdf --chunk-size 500
    """
    files = collect_files(paths)
    if not files:
        click.echo("No supported files found.")
        return

    click.echo(f"Found {len(files)} file(s)")
    click.echo(f"Collection: {collection}\n")

    result = unwrap(
        get_actions().ingest_files(
            collection,
            files,
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            processing_method=method,
        )
    )
    for entry in result["data"]["files"]:
        click.echo(f"  ✓ {entry['filename']}: {entry['chunks']} new chunk(s)")
    click.echo(f"\n✓ Ingestion complete! Stored {result['data']['chunks_added']} chunks.")


if __name__ == "__main__":
    cli()
