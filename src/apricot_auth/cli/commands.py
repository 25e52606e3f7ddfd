from collections.abc import Callable
from typing import Any, TypeVar

import click

from apricot_auth.auth.contracts import OAuthProvider
from apricot_auth.auth.registry import create_provider
from apricot_auth.cli.utils import configure_logging, output_error, output_result, run_async_cli
from apricot_auth.config import load_config

PROVIDER_ID = "wildapricot"

F = TypeVar("F", bound=Callable[..., Any])


def common_options(func: F) -> F:
    """Attach the --config, --json-output and --debug options shared by all commands."""
    func = click.option("--debug", is_flag=True, help="Show detailed debug information")(func)
    func = click.option("--json-output", is_flag=True, help="Output in JSON format")(func)
    func = click.option(
        "--config",
        "config_path",
        type=click.Path(dir_okay=False),
        help="Path to config file (defaults to $APRICOT_AUTH_CONFIG or ~/.apricot-auth/config.yml)",
    )(func)
    return func


def _load_provider(config_path: str | None, debug: bool) -> OAuthProvider:
    config = load_config(config_path)
    configure_logging(debug, config.logging.level)
    return create_provider(PROVIDER_ID, config.wildapricot)


@click.command(name="authorize-url")
@click.option("--state", required=True, help="Opaque state token to round-trip")
@click.option("--redirect-uri", help="Callback URL (defaults to the configured one)")
@click.option("--code-verifier", help="PKCE code verifier")
@common_options
def authorize_url(
    state: str,
    redirect_uri: str | None,
    code_verifier: str | None,
    config_path: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Print the Wild Apricot login URL.

    \b
    Examples:
        apricot-auth authorize-url --state abc123
        apricot-auth authorize-url --state abc123 --redirect-uri https://localhost/cb
    """
    try:
        provider = _load_provider(config_path, debug)
        url = provider.create_authorization_url(
            state=state, redirect_uri=redirect_uri, code_verifier=code_verifier
        )
        output_result(url, json_output)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)


@click.command(name="exchange-code")
@click.argument("code")
@click.option("--redirect-uri", help="Callback URL used for the authorization request")
@click.option("--code-verifier", help="PKCE code verifier")
@common_options
def exchange_code(
    code: str,
    redirect_uri: str | None,
    code_verifier: str | None,
    config_path: str | None,
    json_output: bool,
    debug: bool,
) -> None:
    """Exchange an authorization code for tokens."""
    try:
        provider = _load_provider(config_path, debug)
        tokens = run_async_cli(
            provider.validate_authorization_code(
                code=code, code_verifier=code_verifier, redirect_uri=redirect_uri
            )
        )
        output_result(tokens, json_output)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)


@click.command(name="refresh")
@click.argument("refresh_token")
@common_options
def refresh(refresh_token: str, config_path: str | None, json_output: bool, debug: bool) -> None:
    """Refresh an access token."""
    try:
        provider = _load_provider(config_path, debug)
        tokens = run_async_cli(provider.refresh_access_token(refresh_token))
        output_result(tokens, json_output)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)


@click.command(name="userinfo")
@click.argument("access_token")
@common_options
def userinfo(access_token: str, config_path: str | None, json_output: bool, debug: bool) -> None:
    """Fetch the normalized member profile for an access token."""
    try:
        provider = _load_provider(config_path, debug)
        result = run_async_cli(provider.get_user_info(access_token=access_token))
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
        return

    if result is None:
        raise click.ClickException("Wild Apricot returned no user for this access token")
    output_result(result.user, json_output)
