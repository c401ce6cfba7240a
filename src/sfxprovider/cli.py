"""
sfxprovider CLI - Manage SignalFx resources from YAML declarations.

Commands:
    sfxprovider apply FILE              Create or update declared resources
    sfxprovider refresh                 Re-read tracked resources from the API
    sfxprovider destroy [ADDRESS]       Delete tracked resources
    sfxprovider import TYPE NAME ID     Start tracking an existing resource
    sfxprovider show                    Print tracked state

Declaration file format::

    resources:
      - type: signalfx_alert_muting_rule
        name: maintenance
        attributes:
          description: Weekly maintenance
          start_time: 1767225600
          stop_time: 1767229200
          detectors: [DetA1b2]
          filter:
            - property: env
              property_value: prod
      - type: signalfx_dashboard_group
        name: team
        attributes:
          name: Team dashboards
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Tuple, TypeVar

import click
import yaml
from pydantic import ValidationError

from sfxprovider.client import ClientContext
from sfxprovider.config import ProviderConfig, load_config
from sfxprovider.errors import ProviderError
from sfxprovider.logger import configure_logging
from sfxprovider.resources import ResourceData, get_resource, resource_types
from sfxprovider.state import StateError, StateStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _guard(operation: str, fn: Callable[[], T]) -> T:
    """Run ``fn`` and surface provider errors as click errors."""
    try:
        return fn()
    except (ProviderError, StateError) as e:
        raise click.ClickException(f"{operation}: {e}") from e


def _open_context(ctx: click.Context) -> ClientContext:
    config: ProviderConfig = ctx.obj["config"]
    return _guard(
        "connect",
        lambda: ClientContext.from_config(config, transport=ctx.obj.get("transport")),
    )


def _load_declarations(file_path: Path) -> List[Tuple[str, str, Dict[str, Any]]]:
    """
    Read a declaration file.

    Returns:
        List of (resource_type, name, attributes) in file order
    """
    with open(file_path, encoding="utf-8") as f:
        doc = yaml.safe_load(f) or {}

    entries = doc.get("resources") if isinstance(doc, dict) else None
    if not isinstance(entries, list):
        raise click.ClickException(f"{file_path}: expected a top-level 'resources' list")

    known = resource_types()
    declarations = []
    seen = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise click.ClickException(f"{file_path}: resources[{index}] must be a mapping")
        resource_type = entry.get("type")
        name = entry.get("name")
        attrs = entry.get("attributes") or {}
        if resource_type not in known:
            raise click.ClickException(
                f"{file_path}: resources[{index}] has unknown type {resource_type!r}"
            )
        if not name:
            raise click.ClickException(f"{file_path}: resources[{index}] is missing 'name'")
        if not isinstance(attrs, dict):
            raise click.ClickException(
                f"{file_path}: resources[{index}].attributes must be a mapping"
            )
        unexpected = set(entry) - {"type", "name", "attributes"}
        if unexpected:
            raise click.ClickException(
                f"{file_path}: resources[{index}] has unexpected keys "
                f"{sorted(unexpected)}; resource attributes go under 'attributes'"
            )
        address = f"{resource_type}.{name}"
        if address in seen:
            raise click.ClickException(f"{file_path}: duplicate resource {address}")
        seen.add(address)
        declarations.append((resource_type, name, attrs))
    return declarations


@click.group()
@click.version_option(package_name="sfxprovider")
@click.option("--state-file", envvar="SFX_STATE_FILE", help="Tracked state file")
@click.option("--auth-token", envvar="SFX_AUTH_TOKEN", help="SignalFx access token")
@click.option("--api-url", envvar="SFX_API_URL", help="SignalFx API URL")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Logging level",
)
@click.option("--log-format", type=click.Choice(["json", "text"]), default=None)
@click.pass_context
def main(ctx, state_file, auth_token, api_url, log_level, log_format):
    """sfxprovider - Declarative management of SignalFx resources."""
    ctx.ensure_object(dict)
    try:
        config = load_config(
            state_file=state_file,
            auth_token=auth_token,
            api_url=api_url,
            log_level=log_level,
            log_format=log_format,
        )
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    configure_logging(config.log_level, config.log_format)
    ctx.obj["config"] = config
    ctx.obj["store"] = StateStore(config.get_state_path())


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def apply(ctx, file):
    """Create or update the resources declared in FILE."""
    store: StateStore = ctx.obj["store"]
    declarations = _load_declarations(file)

    planned = []
    for resource_type, name, attrs in declarations:
        handler = get_resource(resource_type)
        address = f"{resource_type}.{name}"
        try:
            declared = handler.state_model.model_validate(attrs)
        except ValidationError as e:
            raise click.ClickException(f"{address}: invalid attributes\n{e}") from e
        planned.append((address, handler, declared))

    with _open_context(ctx) as client_ctx:
        for address, handler, declared in planned:
            tracked = _guard("load state", lambda: store.get(address))

            if tracked is None or not tracked.tracked:
                data = _guard(f"create {address}", lambda: handler.create(client_ctx, ResourceData(state=declared)))
                click.echo(f"{address}: created ({data.id})")
            elif tracked.state is not None and handler.requires_replacement(tracked.state, declared):
                _guard(f"delete {address}", lambda: handler.delete(client_ctx, tracked))
                _guard("save state", lambda: store.remove(address))
                data = _guard(f"create {address}", lambda: handler.create(client_ctx, ResourceData(state=declared)))
                click.echo(f"{address}: replaced ({tracked.id} -> {data.id})")
            else:
                update = handler.prepare_update(tracked, declared)
                data = _guard(f"update {address}", lambda: handler.update(client_ctx, update))
                click.echo(f"{address}: updated ({data.id})")

            _guard("save state", lambda: store.put(address, handler.type_name, data))


@main.command()
@click.pass_context
def refresh(ctx):
    """Re-read every tracked resource; drop the ones deleted remotely."""
    store: StateStore = ctx.obj["store"]
    addresses = _guard("load state", store.addresses)
    if not addresses:
        click.echo("No tracked resources.")
        return

    with _open_context(ctx) as client_ctx:
        for address in addresses:
            handler = get_resource(_guard("load state", lambda: store.resource_type(address)))
            tracked = _guard("load state", lambda: store.get(address))
            data = _guard(f"read {address}", lambda: handler.read(client_ctx, tracked))
            if data.tracked:
                _guard("save state", lambda: store.put(address, handler.type_name, data))
                click.echo(f"{address}: refreshed")
            else:
                _guard("save state", lambda: store.remove(address))
                click.echo(f"{address}: gone, removed from state")


@main.command()
@click.argument("address", required=False)
@click.pass_context
def destroy(ctx, address):
    """Delete ADDRESS, or every tracked resource when omitted."""
    store: StateStore = ctx.obj["store"]
    addresses = _guard("load state", store.addresses)
    if address:
        if address not in addresses:
            raise click.ClickException(f"{address} is not tracked")
        addresses = [address]

    with _open_context(ctx) as client_ctx:
        for addr in reversed(addresses):
            handler = get_resource(_guard("load state", lambda: store.resource_type(addr)))
            tracked = _guard("load state", lambda: store.get(addr))
            _guard(f"delete {addr}", lambda: handler.delete(client_ctx, tracked))
            _guard("save state", lambda: store.remove(addr))
            click.echo(f"{addr}: destroyed")


@main.command("import")
@click.argument("resource_type", type=click.Choice(resource_types()))
@click.argument("name")
@click.argument("resource_id")
@click.pass_context
def import_(ctx, resource_type, name, resource_id):
    """Track an existing remote resource by its id."""
    store: StateStore = ctx.obj["store"]
    address = f"{resource_type}.{name}"
    if _guard("load state", lambda: store.get(address)) is not None:
        raise click.ClickException(f"{address} is already tracked")

    handler = get_resource(resource_type)
    imported = handler.import_state(resource_id)
    with _open_context(ctx) as client_ctx:
        data = _guard(f"read {address}", lambda: handler.read(client_ctx, imported))
    if not data.tracked:
        raise click.ClickException(f"{resource_type} {resource_id} does not exist")

    _guard("save state", lambda: store.put(address, resource_type, data))
    click.echo(f"{address}: imported ({resource_id})")


@main.command()
@click.option("--format", "output_format", type=click.Choice(["yaml", "json"]), default="yaml")
@click.pass_context
def show(ctx, output_format):
    """Print tracked state."""
    store: StateStore = ctx.obj["store"]
    resources = _guard("load state", store.export)
    if output_format == "json":
        click.echo(json.dumps(resources, indent=2, sort_keys=True))
    else:
        click.echo(yaml.safe_dump(resources, sort_keys=True), nl=False)


if __name__ == "__main__":
    main()
