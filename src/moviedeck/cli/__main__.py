from __future__ import annotations

import asyncio
import json
import logging
from datetime import timedelta
from typing import Any

import typer

from moviedeck import __version__
from moviedeck.clients.auth import AuthenticationError
from moviedeck.clients.tvdb import TvdbClient
from moviedeck.config import Settings, SettingsError, SettingsLoadResult, load_settings
from moviedeck.corpus import load_corpus
from moviedeck.models import Movie
from moviedeck.services.discovery import DiscoveryService

EXIT_CONFIG_ERROR = 1
EXIT_AUTH_FAILED = 2
EXIT_NOT_FOUND = 3

app = typer.Typer(
    add_completion=False,
    help="Browse, search and inspect movies from the TVDB catalog, one swipe deck at a time.",
)


@app.callback()
def _cli_entry(ctx: typer.Context) -> None:
    """Entrypoint for the moviedeck CLI."""
    ctx.obj = {} if ctx.obj is None else ctx.obj


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(__version__)


@app.command()
def discover(
    page: int = typer.Option(1, min=1, help="Page number to fetch (1-based)."),
    page_size: int | None = typer.Option(
        None, min=1, help="Movies per page (default: MOVIEDECK_PAGE_SIZE or 10)."
    ),
    json_output: bool = typer.Option(
        False, "--json/--no-json", help="Output as JSON for programmatic use."
    ),
    debug: bool = typer.Option(False, help="Enable debug logging to trace the search plan."),
) -> None:
    """Fetch one page of the discovery deck."""
    if debug:
        _setup_logging(logging.DEBUG)

    settings = _require_settings()
    size = page_size or settings.page_size
    exit_code = asyncio.run(_run_discover(settings, page=page, page_size=size, json_output=json_output))
    raise typer.Exit(code=exit_code)


@app.command()
def search(
    query: str = typer.Argument(..., help="Title to search for."),
    json_output: bool = typer.Option(
        False, "--json/--no-json", help="Output as JSON for programmatic use."
    ),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Search the catalog for movies by title."""
    if debug:
        _setup_logging(logging.DEBUG)

    settings = _require_settings()
    exit_code = asyncio.run(_run_search(settings, query=query, json_output=json_output))
    raise typer.Exit(code=exit_code)


@app.command()
def details(
    movie_id: int = typer.Argument(..., help="TVDB movie id."),
    json_output: bool = typer.Option(
        False, "--json/--no-json", help="Output as JSON for programmatic use."
    ),
    debug: bool = typer.Option(False, help="Enable debug logging."),
) -> None:
    """Show the extended record for one movie."""
    if debug:
        _setup_logging(logging.DEBUG)

    settings = _require_settings()
    exit_code = asyncio.run(_run_details(settings, movie_id=movie_id, json_output=json_output))
    raise typer.Exit(code=exit_code)


@app.command()
def corpus(
    limit: int = typer.Option(10, min=0, help="Number of titles to list."),
) -> None:
    """Show the title corpus that drives discovery searches."""
    load_result = _safe_load_settings(load_even_if_missing=True)
    if load_result is None:
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    titles = load_corpus(load_result.settings.corpus_path)
    source = load_result.settings.corpus_path or "<packaged>"
    typer.secho(f"Corpus: {len(titles)} titles from {source}", fg=typer.colors.CYAN)
    for idx, title in enumerate(titles[:limit], start=1):
        typer.echo(f"{idx}. {title}")


@app.command()
def config(show_sources: bool = typer.Option(False, help="Display configuration hints.")) -> None:
    """Describe configuration expectations."""
    load_result = _safe_load_settings(load_even_if_missing=True)
    if load_result is None:
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    settings = load_result.settings
    values: dict[str, Any] = {
        "tvdb_api_key": "<set>" if settings.tvdb_api_key else "<unset>",
        "tvdb_pin": "<set>" if settings.tvdb_pin else "<unset>",
        "tvdb_base_url": settings.tvdb_base_url,
        "request_timeout": settings.request_timeout,
        "retry_attempts": settings.retry_attempts,
        "token_lifetime_hours": settings.token_lifetime_hours,
        "token_margin_hours": settings.token_margin_hours,
        "page_size": settings.page_size,
        "corpus_path": settings.corpus_path or "<packaged>",
    }

    for key, value in values.items():
        typer.echo(f"{key}: {value}")

    if show_sources:
        source_hint = load_result.source_path or "<env/.env>"
        typer.echo(f"resolved_from: {source_hint}")
        typer.echo(
            "Credentials: TVDB_API_KEY, TVDB_PIN."
            " Configure ~/.config/moviedeck/config.toml for persistent settings.",
        )


def main() -> None:
    """Expose Typer app for the console script."""
    app()


def _safe_load_settings(load_even_if_missing: bool = False) -> SettingsLoadResult | None:
    try:
        return load_settings()
    except SettingsError as exc:
        if load_even_if_missing:
            typer.secho(
                f"Warning: configuration incomplete – {exc}",
                fg=typer.colors.YELLOW,
            )
            return SettingsLoadResult(settings=Settings(), source_path=None)
        typer.secho(str(exc), fg=typer.colors.RED)
        return None


def _require_settings() -> Settings:
    load_result = _safe_load_settings()
    if load_result is None:
        raise typer.Exit(code=EXIT_CONFIG_ERROR)

    settings = load_result.settings
    try:
        settings.require_tvdb()
    except SettingsError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc
    return settings


def _setup_logging(level: int = logging.INFO) -> None:
    """Configure logging for debug mode."""
    logging.basicConfig(
        format="%(message)s",
        level=level,
        force=True,
    )


def _build_client(settings: Settings) -> TvdbClient:
    assert settings.tvdb_api_key is not None
    return TvdbClient(
        settings.tvdb_api_key,
        base_url=settings.tvdb_base_url,
        pin=settings.tvdb_pin,
        timeout=settings.request_timeout,
        token_lifetime=timedelta(hours=settings.token_lifetime_hours),
        safety_margin=timedelta(hours=settings.token_margin_hours),
        retry_attempts=settings.retry_attempts,
    )


async def _run_discover(settings: Settings, *, page: int, page_size: int, json_output: bool) -> int:
    titles = load_corpus(settings.corpus_path)
    async with _build_client(settings) as client:
        service = DiscoveryService(client, titles, page_size=page_size)
        try:
            movies = await service.get_popular_movies(page)
        except AuthenticationError as exc:
            return _report_auth_failure(exc, json_output=json_output)

    if json_output:
        typer.echo(json.dumps([_movie_json(movie) for movie in movies], indent=2))
    else:
        _render_movies(movies, header=f"Page {page} ({len(movies)} movies)")
    return 0


async def _run_search(settings: Settings, *, query: str, json_output: bool) -> int:
    async with _build_client(settings) as client:
        service = DiscoveryService(client, load_corpus(settings.corpus_path))
        try:
            movies = await service.search_movies(query)
        except AuthenticationError as exc:
            return _report_auth_failure(exc, json_output=json_output)

    if json_output:
        typer.echo(json.dumps([_movie_json(movie) for movie in movies], indent=2))
    else:
        _render_movies(movies, header=f"Results for {query!r}")
    return 0


async def _run_details(settings: Settings, *, movie_id: int, json_output: bool) -> int:
    async with _build_client(settings) as client:
        service = DiscoveryService(client, load_corpus(settings.corpus_path))
        try:
            movie = await service.get_movie_details(movie_id)
        except AuthenticationError as exc:
            return _report_auth_failure(exc, json_output=json_output)

    if movie is None:
        if json_output:
            _output_json_error("movie_not_found", f"No movie with id {movie_id}")
        else:
            typer.secho(f"No movie with id {movie_id}.", fg=typer.colors.YELLOW)
        return EXIT_NOT_FOUND

    if json_output:
        typer.echo(json.dumps(_movie_json(movie), indent=2))
        return 0

    typer.secho(f"{movie.title} ({movie.year})", fg=typer.colors.GREEN)
    typer.echo(f"Genres: {', '.join(movie.genres) or 'Unknown'}")
    typer.echo(f"Runtime: {movie.runtime_text}")
    typer.echo(f"Rating: {movie.rating_text}")
    if movie.status:
        typer.echo(f"Status: {movie.status}")
    if movie.companies:
        typer.echo(f"Companies: {', '.join(movie.companies)}")
    if movie.overview:
        typer.echo(f"Overview: {movie.overview[:200]}{'...' if len(movie.overview) > 200 else ''}")
    return 0


def _report_auth_failure(exc: AuthenticationError, *, json_output: bool) -> int:
    if json_output:
        details = {"status_code": exc.status_code} if exc.status_code is not None else None
        _output_json_error("authentication_failed", str(exc), details=details)
    else:
        typer.secho(str(exc), fg=typer.colors.RED)
    return EXIT_AUTH_FAILED


def _render_movies(movies: list[Movie], *, header: str) -> None:
    if not movies:
        typer.secho("No movies found.", fg=typer.colors.YELLOW)
        return

    typer.secho(header, fg=typer.colors.CYAN)
    for idx, movie in enumerate(movies, start=1):
        typer.echo(f"{idx}. {movie.title} ({movie.year}) • tvdb:{movie.id}")
        if movie.genre_text:
            typer.echo(f"   {movie.genre_text}")


def _movie_json(movie: Movie) -> dict[str, Any]:
    payload = movie.model_dump(mode="json")
    payload["year"] = movie.year
    return payload


def _output_json_error(
    error_code: str, message: str, details: dict[str, Any] | None = None
) -> None:
    """Output a JSON error message."""
    output: dict[str, Any] = {
        "success": False,
        "error": error_code,
        "message": message,
    }
    if details:
        output["details"] = details
    typer.echo(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
