import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from rusty_refactor.cli.browse import browse, select
from rusty_refactor.cli.extract import plan, resolve, symbols
from rusty_refactor.cli.serve import serve_app

app = typer.Typer(
    name="rusty-refactor",
    help="rusty-refactor CLI: resolve code to extract and pick where the new module goes.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr.")] = False,
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
            force=True,
        )


app.command("symbols")(symbols)
app.command("resolve")(resolve)
app.command("plan")(plan)
app.command("browse")(browse)
app.command("select")(select)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
