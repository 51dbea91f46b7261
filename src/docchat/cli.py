"""CLI entry point — Typer app for docchat commands.

Usage:
    docchat ingest report.pdf --file-id f1 --user-id u1 --folder-id d1
    docchat ask "What does the report conclude?" --user-id u1 --file-id f1
    docchat ask "Compare the findings" --user-id u1 --folder-id d1 -m f1 -m f2
    docchat delete --file-id f1 --user-id u1
    docchat status
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from docchat import __version__
from docchat.config import Settings, load_settings

app = typer.Typer(
    name="docchat",
    help="Document chat — ingest documents and ask grounded questions.",
    no_args_is_help=True,
)

console = Console()
logger = logging.getLogger(__name__)

_INGEST_PATH = typer.Argument(..., help="Path to the document to ingest")
_QUESTION = typer.Argument(..., help="Question to ask")
_CONFIG = typer.Option(None, "--config", "-c", help="Settings YAML file")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


# ---------------------------------------------------------------------------
# Component wiring
# ---------------------------------------------------------------------------


def _build_embedder(settings: Settings):
    from docchat.embeddings.embedder import Embedder
    from docchat.embeddings.factory import get_embedding_provider

    cfg = settings.embedding
    kwargs = {"model": cfg.model}
    if cfg.provider in ("openai", "ollama"):
        kwargs["dimension"] = cfg.dimension
    if cfg.provider == "openai":
        kwargs.update(
            api_key=cfg.api_key,
            base_url=cfg.base_url,
            azure_endpoint=cfg.azure_endpoint,
            api_version=cfg.api_version,
        )
    elif cfg.provider == "ollama" and cfg.base_url:
        kwargs["base_url"] = cfg.base_url

    provider = get_embedding_provider(cfg.provider, **kwargs)
    return Embedder(provider, dimension=cfg.dimension)


def _build_store(settings: Settings):
    from docchat.vectorstore.factory import get_vector_store

    cfg = settings.vectorstore
    dim = settings.embedding.dimension
    if cfg.backend == "faiss":
        store = get_vector_store("faiss", dimension=dim)
        if (Path(cfg.path) / "index.faiss").exists():
            store.load(cfg.path)
        return store
    if cfg.backend == "qdrant":
        return get_vector_store(
            "qdrant",
            collection_name=cfg.index_name,
            dimension=dim,
            url=cfg.url,
            api_key=cfg.api_key,
            path=None if cfg.url else cfg.path,
        )
    return get_vector_store(
        cfg.backend,
        index_host=cfg.url,
        api_key=cfg.api_key,
        namespace=cfg.namespace,
        dimension=dim,
    )


def _build_llm(settings: Settings):
    from docchat.llm.factory import get_llm_provider

    cfg = settings.llm
    kwargs = {
        "model": cfg.model,
        "temperature": cfg.temperature,
        "max_tokens": cfg.max_tokens,
    }
    if cfg.provider in ("openai", "anthropic"):
        kwargs["api_key"] = cfg.api_key
    if cfg.provider == "openai":
        kwargs.update(
            base_url=cfg.base_url,
            azure_endpoint=cfg.azure_endpoint,
            api_version=cfg.api_version,
        )
    elif cfg.provider == "ollama" and cfg.base_url:
        kwargs["base_url"] = cfg.base_url
    return get_llm_provider(cfg.provider, **kwargs)


def _persist(store, settings: Settings) -> None:
    if settings.vectorstore.backend == "faiss":
        store.save(settings.vectorstore.path)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def ingest(
    path: Annotated[Path, _INGEST_PATH],
    file_id: str = typer.Option(..., "--file-id", "-f", help="Document identifier"),
    user_id: str = typer.Option("", "--user-id", "-u", help="Owner identifier"),
    folder_id: str | None = typer.Option(None, "--folder-id", "-d", help="Folder identifier"),
    config: Path | None = _CONFIG,
) -> None:
    """Ingest a document into the vector store."""
    from docchat.chunking.factory import get_chunker
    from docchat.documents.loader import DocumentLoader
    from docchat.exceptions import DocChatError
    from docchat.pipeline.ingest import IngestPipeline

    settings = load_settings(config)

    async def run():
        embedder = _build_embedder(settings)
        store = _build_store(settings)
        pipeline = IngestPipeline(
            embedder=embedder,
            vector_store=store,
            loader=DocumentLoader(
                supported_formats=settings.ingestion.supported_formats,
                max_file_size_mb=settings.ingestion.max_file_size_mb,
            ),
            chunker=get_chunker(
                settings.chunking.strategy,
                **_chunker_kwargs(settings),
            ),
            batch_size=settings.ingestion.batch_size,
            max_stored_chars=settings.ingestion.max_stored_chars,
            replace_existing=settings.ingestion.replace_existing,
        )
        try:
            result = await pipeline.ingest_file(path, file_id, user_id, folder_id)
            _persist(store, settings)
            return result
        finally:
            await embedder.provider.aclose()
            await store.aclose()

    try:
        result = asyncio.run(run())
    except DocChatError as exc:
        console.print(f"[bold red]Ingestion failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"\n[bold green]Ingested:[/] {path.name} as {result.file_id}")
    console.print(f"  Pages: {result.pages}")
    console.print(f"  Chunks: {result.chunks_created}")
    console.print(f"  Stored: {result.chunks_stored} ({result.batches} batches)")

    for w in result.warnings:
        console.print(f"  [yellow]Warning:[/] {w}")


@app.command()
def ask(
    question: Annotated[str, _QUESTION],
    user_id: str = typer.Option("", "--user-id", "-u", help="Owner identifier"),
    file_id: str | None = typer.Option(None, "--file-id", "-f", help="Chat with one file"),
    folder_id: str | None = typer.Option(None, "--folder-id", "-d", help="Chat with a folder"),
    member: list[str] = typer.Option(
        [], "--member", "-m", help="File id belonging to the folder (repeatable)",
    ),
    config: Path | None = _CONFIG,
) -> None:
    """Ask a question grounded in a file or folder."""
    from docchat.exceptions import DocChatError
    from docchat.llm.schemas import ChatMessage
    from docchat.pipeline.chat import ChatPipeline
    from docchat.retrieval.retriever import Retriever
    from docchat.retrieval.schemas import RetrievalScope

    if folder_id:
        scope = RetrievalScope.for_folder(folder_id, member)
    elif file_id:
        scope = RetrievalScope.for_file(file_id)
    else:
        scope = RetrievalScope()

    settings = load_settings(config)

    async def run():
        embedder = _build_embedder(settings)
        store = _build_store(settings)
        llm = _build_llm(settings)
        retriever = Retriever(
            embedder,
            store,
            top_k=settings.retrieval.top_k,
            allow_unscoped=settings.retrieval.allow_unscoped,
            max_concurrency=settings.retrieval.max_concurrency,
        )
        try:
            return await ChatPipeline(retriever, llm).chat(
                [ChatMessage("user", question)], scope, user_id
            )
        finally:
            await embedder.provider.aclose()
            await store.aclose()
            await llm.aclose()

    try:
        response = asyncio.run(run())
    except DocChatError as exc:
        console.print(f"[bold red]Chat failed:[/] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"\n[bold]Q:[/] {question}")
    console.print(f"\n[bold green]A:[/] {response.answer}")

    if response.context:
        table = Table(title="Context")
        table.add_column("#", style="cyan")
        table.add_column("Chunk")
        table.add_column("Score")
        table.add_column("Text")
        for i, match in enumerate(response.context, 1):
            table.add_row(str(i), match.id, f"{match.score:.3f}", match.text[:80])
        console.print(table)

    console.print(
        f"\n[dim]Model: {response.model} | Grounding: {response.grounding.value} "
        f"| Files: {response.files_with_hits}/{response.files_searched}[/]",
    )


@app.command()
def delete(
    file_id: str = typer.Option(..., "--file-id", "-f", help="Document identifier"),
    user_id: str = typer.Option("", "--user-id", "-u", help="Owner identifier"),
    config: Path | None = _CONFIG,
) -> None:
    """Delete every chunk of a document."""
    from docchat.pipeline.ingest import IngestPipeline

    settings = load_settings(config)

    async def run():
        embedder = _build_embedder(settings)
        store = _build_store(settings)
        try:
            await IngestPipeline(embedder, store).delete_document(file_id, user_id)
            _persist(store, settings)
        finally:
            await embedder.provider.aclose()
            await store.aclose()

    asyncio.run(run())
    console.print(f"[bold green]Deleted:[/] {file_id}")


@app.command()
def status(config: Path | None = _CONFIG) -> None:
    """Show available components and the active configuration."""
    from docchat.chunking.factory import available_chunkers
    from docchat.embeddings.factory import available_providers as emb_providers
    from docchat.llm.factory import available_providers as llm_providers
    from docchat.vectorstore.factory import available_stores

    settings = load_settings(config)

    console.print(f"\n[bold green]document-chat-rag[/] v{__version__}\n")

    table = Table(title="Available Components")
    table.add_column("Layer", style="cyan")
    table.add_column("Available")
    table.add_column("Configured")

    table.add_row("Chunkers", ", ".join(available_chunkers()), settings.chunking.strategy)
    table.add_row(
        "Embedding Providers",
        ", ".join(emb_providers()),
        f"{settings.embedding.provider} ({settings.embedding.model}, "
        f"dim={settings.embedding.dimension})",
    )
    table.add_row("Vector Stores", ", ".join(available_stores()), settings.vectorstore.backend)
    table.add_row(
        "LLM Providers",
        ", ".join(llm_providers()),
        f"{settings.llm.provider} ({settings.llm.model})",
    )

    console.print(table)


def _chunker_kwargs(settings: Settings) -> dict:
    cfg = settings.chunking
    if cfg.strategy == "words":
        return {"max_chunk_size": cfg.chunk_size}
    return {"chunk_size": cfg.chunk_size, "chunk_overlap": cfg.chunk_overlap}


if __name__ == "__main__":
    app()
