import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from config.settings import settings

from .commands.parameters import DecimalType, IntegerType, KeywordType, ParameterType, StringType, WildcardType
from .commands.parsers import ArgumentParser
from .commands.values import is_error

app = typer.Typer(
    name="bruhbot",
    help="Text command framework for Discord bots",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def parameter_type_from_spec(spec: str) -> ParameterType:
    """Build a parameter type from a CLI type name such as ``integer`` or ``keyword:yes,no``."""
    kind, _, argument = spec.partition(":")
    kind = kind.strip().lower()
    if kind == "string":
        return StringType(allow_spaces=True)
    if kind == "word":
        return StringType(allow_spaces=False)
    if kind == "keyword":
        words = {word.strip() for word in argument.split(",") if word.strip()}
        if not words:
            raise typer.BadParameter("keyword types need words, e.g. keyword:yes,no")
        return KeywordType(frozenset(words))
    if kind == "integer":
        return IntegerType()
    if kind == "decimal":
        return DecimalType()
    if kind == "wildcard":
        return WildcardType()
    raise typer.BadParameter(f"Unknown parameter type: {spec}")


@app.command()
def run(
    dev: bool = typer.Option(False, "--dev", help="Run in development mode"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Set log level"),
) -> None:
    """Run the bot."""
    if dev:
        settings.environment = "development"
        settings.debug = True

    setup_logging(log_level or settings.log_level)

    from .core import BruhBot

    BruhBot(settings).run()


@app.command()
def modules() -> None:
    """List the modules found in the module directories."""
    typer.echo("📦 Available Modules:")
    for directory in settings.module_directories:
        module_dir = Path(directory)
        if not module_dir.exists():
            continue
        for module_path in sorted(module_dir.iterdir()):
            if module_path.is_dir() and (module_path / "__init__.py").exists():
                enabled = "✅" if module_path.name in settings.enabled_modules else "❌"
                typer.echo(f"  {enabled} {module_path.name}")


@app.command()
def parse(
    text: str = typer.Argument(help="Argument text to parse"),
    types: List[str] = typer.Option(
        [], "--type", "-t", help="Expected type: string, word, keyword:a,b, integer, decimal, wildcard"
    ),
) -> None:
    """Parse TEXT against a list of parameter types and show every slot."""
    expected = [parameter_type_from_spec(spec) for spec in types]
    results = ArgumentParser().parse(text, expected)

    failed = False
    for position, result in enumerate(results, start=1):
        name = expected[position - 1].name if position <= len(expected) else "leftover"
        if is_error(result):
            failed = True
            typer.echo(f"❌ {position}. {name}: {result.user_message}")
        else:
            typer.echo(f"✅ {position}. {name}: {result.value!r}")

    if failed:
        raise typer.Exit(code=1)


@app.command()
def db(
    action: str = typer.Argument(help="Action: create, reset"),
) -> None:
    """Database management commands."""

    async def run_db_command():
        from .database import DatabaseManager

        db_manager = DatabaseManager(settings.database_url)
        try:
            if action == "create":
                await db_manager.create_tables()
                typer.echo("✅ Database tables created")
            elif action == "reset":
                confirm = typer.confirm("⚠️  This will delete all data. Continue?")
                if confirm:
                    await db_manager.drop_tables()
                    await db_manager.create_tables()
                    typer.echo("✅ Database reset completed")
            else:
                typer.echo(f"Unknown action: {action}")
        finally:
            await db_manager.close()

    asyncio.run(run_db_command())


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
