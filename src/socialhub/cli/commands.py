"""CLI commands for SocialHub.

Commands:
- init-db: Create the record store schema and bucket root
- check: Test the data-client connection
- serve: Run the Web API with uvicorn
- create-user: Register an account from the terminal
- seed-templates: Insert the built-in map templates
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from socialhub.auth.session import AuthError, SessionHolder
from socialhub.config.app_config import load_app_config
from socialhub.config.logging import configure_logging
from socialhub.db.client import DataClient, check_connection, configure_client
from socialhub.pages.maps import MapsPage

app = typer.Typer(
    name="socialhub",
    help="SocialHub: notes, drawings, maps, library, quizzes, videos, feed and chat.",
    no_args_is_help=True,
)

console = Console()

# Templates installed by seed-templates
DEFAULT_TEMPLATES = [
    {
        "name": "Mind Map",
        "description": "A central idea with branching topics",
        "category": "Brainstorming",
        "template_data": {
            "elements": [
                {"id": "root", "type": "node", "text": "Central Idea", "x": 400, "y": 300},
                {"id": "b1", "type": "node", "text": "Topic 1", "x": 200, "y": 150},
                {"id": "b2", "type": "node", "text": "Topic 2", "x": 600, "y": 150},
                {"id": "e1", "type": "edge", "from": "root", "to": "b1"},
                {"id": "e2", "type": "edge", "from": "root", "to": "b2"},
            ],
            "zoom": 1,
            "center": {"x": 400, "y": 300},
        },
    },
    {
        "name": "Flowchart",
        "description": "Start, a decision and an end step",
        "category": "Process",
        "template_data": {
            "elements": [
                {"id": "start", "type": "node", "text": "Start", "x": 400, "y": 80},
                {"id": "check", "type": "decision", "text": "Condition?", "x": 400, "y": 220},
                {"id": "end", "type": "node", "text": "End", "x": 400, "y": 380},
                {"id": "e1", "type": "edge", "from": "start", "to": "check"},
                {"id": "e2", "type": "edge", "from": "check", "to": "end"},
            ],
            "zoom": 1,
            "center": {"x": 400, "y": 240},
        },
    },
    {
        "name": "Org Chart",
        "description": "A simple team hierarchy",
        "category": "Business",
        "template_data": {
            "elements": [
                {"id": "lead", "type": "node", "text": "Team Lead", "x": 400, "y": 100},
                {"id": "m1", "type": "node", "text": "Member", "x": 250, "y": 260},
                {"id": "m2", "type": "node", "text": "Member", "x": 550, "y": 260},
                {"id": "e1", "type": "edge", "from": "lead", "to": "m1"},
                {"id": "e2", "type": "edge", "from": "lead", "to": "m2"},
            ],
            "zoom": 1,
            "center": {"x": 400, "y": 180},
        },
    },
]


def _client(db_path: str | None = None) -> DataClient:
    """Build the shared client from config, with an optional database override."""
    config = load_app_config()
    configure_logging(config.logging)
    return configure_client(
        db_path=Path(db_path or config.database.path),
        storage_root=Path(config.storage.root),
        public_url=config.storage.public_url,
        buckets=config.storage.buckets,
    )


@app.command(name="init-db")
def init_db(
    db_path: str | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """Create the database schema and storage root."""
    client = _client(db_path)
    client.storage.root.mkdir(parents=True, exist_ok=True)
    console.print("[green]✓ Database initialized[/green]")
    console.print(f"  [dim]database:[/dim] {client.db_path}")
    console.print(f"  [dim]storage:[/dim]  {client.storage.root}")


@app.command()
def check(
    db_path: str | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """Test the connection to the record store."""
    report = check_connection(_client(db_path))
    if not report.ok:
        console.print(f"[red]✗ Connection failed: {report.error}[/red]")
        raise typer.Exit(code=1)

    console.print("[green]✓ Connection OK[/green]")
    console.print(f"  [dim]database:[/dim] {report.db_path}")
    console.print(f"  [dim]tables:[/dim]   {len(report.tables)}")
    console.print(f"  [dim]users:[/dim]    {report.user_count}")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the Web API."""
    import uvicorn

    server = load_app_config().server
    bind_host = host or server.host
    bind_port = port or server.port
    console.print(f"[blue]Serving SocialHub API on http://{bind_host}:{bind_port}[/blue]")
    uvicorn.run("socialhub.web.api:app", host=bind_host, port=bind_port, reload=reload)


@app.command(name="create-user")
def create_user(
    email: str = typer.Argument(..., help="Email address"),
    username: str = typer.Argument(..., help="Username (3-30 letters, digits, '_' or '.')"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, help="Password"
    ),
    full_name: str | None = typer.Option(None, "--name", "-n", help="Full name"),
    db_path: str | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """Register an account."""
    session = SessionHolder(_client(db_path))
    try:
        session.sign_up(email, password, username, full_name)
    except AuthError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Created user {username}[/green]")
    console.print(f"  [dim]user_id:[/dim] {session.user_id}")
    session.sign_out()


@app.command(name="seed-templates")
def seed_templates(
    db_path: str | None = typer.Option(None, "--db", help="Database file (default from config)"),
) -> None:
    """Insert the built-in map templates that are not there yet."""
    client = _client(db_path)
    page = MapsPage(client, SessionHolder(client))
    existing = {t["name"] for t in page.load_templates()}

    table = Table(show_header=True, header_style="bold")
    table.add_column("Template", style="cyan")
    table.add_column("Category")
    table.add_column("Status", justify="center")

    failed = False
    for template in DEFAULT_TEMPLATES:
        if template["name"] in existing:
            table.add_row(template["name"], template["category"], "[dim]exists[/dim]")
            continue
        created = page.create_template(
            template["name"],
            template["template_data"],
            description=template["description"],
            category=template["category"],
        )
        if created is None:
            failed = True
            table.add_row(template["name"], template["category"], "[red]✗[/red]")
        else:
            table.add_row(template["name"], template["category"], "[green]✓[/green]")

    console.print(table)
    if failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
