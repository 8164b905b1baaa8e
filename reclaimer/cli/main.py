"""Main CLI entry point using Typer."""

import logging
import sys
from datetime import datetime, timezone
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..aws.client import AwsClientError
from ..store.base import EntityNotFoundError
from ..utils.logging import setup_logging
from .config import Config

logger = logging.getLogger(__name__)

# Create Typer app
app = typer.Typer(
    name="reclaimer",
    help="AWS Account Reclaimer - clean released accounts and return them to the pool",
    add_completion=False,
)

# Create Rich console for output
console = Console()

# Global config
config: Optional[Config] = None


@app.callback()
def main(
    store_path: Optional[str] = typer.Option(
        None,
        "--store-path",
        help="Custom path for the entity store (default: ~/.reclaimer/store or $RECLAIMER_STORE_PATH)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress output except errors"),
    no_color: bool = typer.Option(False, "--no-color", help="Disable colored output"),
):
    """AWS Account Reclaimer - clean released accounts and return them to the pool."""
    global config

    # Load configuration
    config = Config.load()

    # Override with CLI options
    if store_path:
        config.store_path = store_path

    # Setup logging
    log_level = "ERROR" if quiet else ("DEBUG" if verbose else config.log_level)
    setup_logging(level=log_level, verbose=verbose)

    # Disable colors if requested
    if no_color:
        console.no_color = True


@app.command()
def version():
    """Show version information."""
    import boto3

    from .. import __version__

    console.print(f"aws-account-reclaimer version {__version__}")
    console.print(f"Python {sys.version.split()[0]}")
    console.print(f"boto3 {boto3.__version__}")


@app.command()
def finalize(
    claim: str = typer.Argument(..., help="Name of the released AccountClaim"),
    namespace: str = typer.Option(..., "--namespace", "-n", help="Namespace of the AccountClaim"),
    no_audit: bool = typer.Option(False, "--no-audit", help="Do not write an audit log entry"),
):
    """Reclaim the account bound to a released AccountClaim.

    Pooled accounts are scrubbed (snapshots, volumes, S3 buckets, Route53 zones,
    IAM credentials) and returned to the pool as Ready, or marked Failed if any
    cleanup failed. BYOC accounts have their operator IAM users removed and are
    deleted.

    Examples:
        # Finalize a claim from the default store
        reclaimer finalize my-claim --namespace customer-ns

        # Use a custom store location
        reclaimer --store-path ./store finalize my-claim -n customer-ns
    """
    from ..models.account import AccountState
    from ..reclaim.audit import AuditStorage
    from ..reclaim.finalizer import AccountReclaimer
    from ..store.file_store import FileAccountStore, FileSecretStore

    try:
        account_store = FileAccountStore(config.store_path)
        secret_store = FileSecretStore(config.store_path)
        audit_storage = None if no_audit else AuditStorage(config.audit_path)

        account_claim = account_store.get_claim(claim, namespace)
        console.print(f"\n♻️  Reclaiming account [bold cyan]{account_claim.spec.account_link}[/bold cyan]\n")

        reclaimer = AccountReclaimer(
            account_store=account_store,
            secret_store=secret_store,
            account_namespace=config.account_namespace,
            audit_storage=audit_storage,
        )
        result = reclaimer.finalize(account_claim)

        if result.byoc:
            if result.account_deleted:
                console.print(f"✓ BYOC account [cyan]{result.account_name}[/cyan] deleted", style="bold green")
            else:
                console.print(
                    f"⚠ BYOC claim finalized but account [cyan]{result.account_name}[/cyan] could not be deleted",
                    style="bold yellow",
                )
        elif result.state == AccountState.READY:
            console.print(f"✓ Account [cyan]{result.account_name}[/cyan] returned to the pool (Ready)", style="bold green")
        else:
            console.print(f"✗ Account [cyan]{result.account_name}[/cyan] cleanup failed (Failed)", style="bold red")

    except EntityNotFoundError as e:
        console.print(f"✗ {e}", style="bold red")
        raise typer.Exit(code=1)
    except AwsClientError as e:
        console.print(f"✗ Unable to create AWS client: {e}", style="bold red")
        raise typer.Exit(code=1)
    except Exception as e:
        console.print(f"✗ Error during reclamation: {e}", style="bold red")
        logger.exception("Error in finalize command")
        raise typer.Exit(code=2)


# Audit commands group
audit_app = typer.Typer(help="Reclamation audit log commands")
app.add_typer(audit_app, name="audit")


@audit_app.command("list")
def audit_list(
    since: Optional[str] = typer.Option(None, "--since", help="Only show reclamations since date (YYYY-MM-DD)"),
):
    """List recorded reclamations."""
    from ..reclaim.audit import AuditStorage

    since_dt = None
    if since:
        try:
            since_dt = datetime.strptime(since, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        except ValueError:
            console.print(f"✗ Invalid date format: {since}. Use YYYY-MM-DD", style="bold red")
            raise typer.Exit(code=1)

    entries = AuditStorage(config.audit_path).query_reclamations(since=since_dt)

    if not entries:
        console.print("No reclamations recorded.")
        return

    table = Table(title="Reclamations")
    table.add_column("Timestamp", style="dim")
    table.add_column("Claim", style="cyan")
    table.add_column("Account")
    table.add_column("BYOC")
    table.add_column("Result")

    for entry in entries:
        data = entry["reclamation"]
        if data["byoc"]:
            outcome = "deleted" if data["account_deleted"] else "[yellow]delete failed[/yellow]"
        elif data["state"] == "Ready":
            outcome = "[green]Ready[/green]"
        else:
            outcome = "[red]Failed[/red]"

        table.add_row(
            data["timestamp"],
            f"{data['claim_namespace']}/{data['claim_name']}",
            data["account_name"],
            "yes" if data["byoc"] else "no",
            outcome,
        )

    console.print(table)


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    cli_main()
