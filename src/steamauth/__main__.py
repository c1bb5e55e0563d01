import asyncio
import logging
from typing import Optional
import typer

from .config import get_settings
from .auth.openid import build_openid_redirect
from .auth.models import TokenSet
from .auth.provider import SteamProvider
from .api.app import create_app
from .errors import ConfigurationError, SteamAuthError, Unauthenticated
import uvicorn

app = typer.Typer()

logger = logging.getLogger("steamauth")


def setup_logging(verbosity: int):
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _provider(ctx: typer.Context) -> SteamProvider:
    try:
        return SteamProvider(ctx.obj["settings"].provider_config())
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(2)


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", help="Path to .env config file"
    ),
    verbose: int = typer.Option(0, "-v", count=True, help="Increase verbosity (-v, -vv)"),
):
    if config_file:
        settings = get_settings(config_file)
    else:
        settings = get_settings()
    ctx.obj = {"settings": settings}
    setup_logging(verbose)
    logger.debug("Settings loaded: %s", settings.model_dump(exclude={"steam_client_secret"}))


@app.command()
def login_url(
    ctx: typer.Context,
    return_to: Optional[str] = typer.Option(None, help="Return URL, defaults to the configured callback"),
    realm: Optional[str] = typer.Option(None, help="Realm, defaults to the origin of the return URL"),
):
    if return_to is None:
        return_to = f"{ctx.obj['settings'].callback_url}/steam"
    url = build_openid_redirect(return_to, realm)
    typer.echo(url)


@app.command()
def verify(ctx: typer.Context, callback_url: str = typer.Argument(..., help="URL Steam redirected back to")):
    provider = _provider(ctx)
    try:
        tokens = asyncio.run(provider.token(callback_url))
    except Unauthenticated:
        typer.echo("Unauthenticated", err=True)
        raise typer.Exit(1)
    except SteamAuthError as exc:
        typer.echo(f"Verification failed: {exc}", err=True)
        raise typer.Exit(1)
    typer.echo(tokens.steam_id)


@app.command()
def profile(ctx: typer.Context, steamid: str = typer.Argument(..., help="SteamID64")):
    provider = _provider(ctx)
    # userinfo only reads steam_id; the placeholder tokens are never sent anywhere
    tokens = TokenSet(id_token="", access_token="", steam_id=steamid)
    try:
        identity = asyncio.run(provider.userinfo(tokens))
    except SteamAuthError as exc:
        typer.echo(f"Profile lookup failed: {exc}", err=True)
        raise typer.Exit(1)
    typer.echo(identity.model_dump_json(indent=2))


@app.command(name="serve-api")
def serve_api(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload (dev only)"),
):

    app_instance = create_app()
    uvicorn.run(app_instance, host=host, port=port, reload=reload)

if __name__ == "__main__":
    app()
