import typer
from pathlib import Path
from typing import List, Optional

from rich.table import Table
from rich.markup import escape

from contextbundle.logging_config import logger, setup_logging, reset_logging
from contextbundle.exceptions import ConfigError, ContextBundleError, TokenBudgetExceededError
from contextbundle.manifest import load_manifest
from contextbundle.grouping import (
    GroupOptions,
    IdentifierGroup,
    build_groups,
    filter_groups_for_identifiers,
)
from contextbundle.context import Context, build_budgeted_context, partition_identifiers
from contextbundle.tokens import format_token_count, tiktoken_counter
from contextbundle.cli import CLIConfig, echo, get_console, print_error, print_json, print_metric

app = typer.Typer()
console = get_console()

# Exit code when a bundle cannot be pruned into its budget
EXIT_OVER_BUDGET = 2


@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: tables and colors (also via CONTEXTBUNDLE_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log grouping and pruning decisions to stderr."
    ),
):
    """
    contextbundle: token-budgeted code bundles for language models.

    Machine mode is DEFAULT (pure data, no formatting).
    Use --human/-H for pretty output.
    """
    if human:
        CLIConfig.set_machine_mode(False)

    reset_logging()
    if verbose:
        setup_logging(level="DEBUG", suppress_console=False)
    else:
        setup_logging(suppress_console=CLIConfig.is_machine_mode())


def _group_options(
    package_docs: bool, tests: bool, external: bool, docs_policy: bool, tokenizer: Optional[str] = None
) -> GroupOptions:
    count_tokens = None
    if tokenizer:
        try:
            count_tokens = tiktoken_counter(tokenizer)
        except ValueError as e:
            raise ConfigError(f"Unknown tokenizer encoding '{tokenizer}': {e}") from e

    return GroupOptions(
        include_package_docs=package_docs,
        include_test_files=tests,
        include_external_deps=external,
        consider_ambiguous_documented=docs_policy,
        consider_test_funcs_documented=docs_policy,
        consider_const_blocks_documenting=docs_policy,
        count_tokens=count_tokens,
    )


def _load_groups(manifest: Path, options: GroupOptions) -> List[IdentifierGroup]:
    loaded = load_manifest(manifest)
    module = loaded.module if options.include_external_deps else None
    return build_groups(loaded.graph, loaded.package, options, module=module)


def _context_summary(context: Context) -> dict:
    return {
        "added_identifiers": context.added_identifiers(),
        "free_identifiers": context.identifiers_for_free(),
        "cost": context.cost(),
    }


# Shared grouping flags
PACKAGE_DOCS_OPTION = typer.Option(False, "--package-docs", help="Add a group for package documentation.")
TESTS_OPTION = typer.Option(False, "--tests", help="Keep identifiers declared in test files.")
EXTERNAL_OPTION = typer.Option(False, "--external", help="Attach docs of identifiers from dependency packages.")
DOCS_POLICY_OPTION = typer.Option(
    False, "--docs-policy", help="Treat ambiguous names, test funcs and const-block comments as documentation."
)
JSON_OPTION = typer.Option(False, "--json", help="Output results as JSON for agents.")
TOKENIZER_OPTION = typer.Option(
    None, "--tokenizer", help="tiktoken encoding for token counts (ex: cl100k_base). Default: bytes / 4."
)


@app.command()
def groups(
    manifest: Path = typer.Argument(..., help="Package manifest (JSON).", exists=True, dir_okay=False, readable=True),
    package_docs: bool = PACKAGE_DOCS_OPTION,
    tests: bool = TESTS_OPTION,
    external: bool = EXTERNAL_OPTION,
    docs_policy: bool = DOCS_POLICY_OPTION,
    tokenizer: Optional[str] = TOKENIZER_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Lists the identifier groups of a package with their token costs.
    """
    try:
        options = _group_options(package_docs, tests, external, docs_policy, tokenizer)
        result = _load_groups(manifest, options)
    except ContextBundleError as e:
        print_error(str(e), code=type(e).__name__)
        raise typer.Exit(code=1)

    if json_output:
        print_json({"options": options.to_dict(), "groups": [g.to_dict() for g in result]})
        return

    if CLIConfig.is_machine_mode():
        for group in result:
            flags = ",".join(
                name for name, on in (
                    ("documented", group.is_documented),
                    ("test", group.is_test_file),
                ) if on
            )
            echo(f"{','.join(group.ids)}\t{group.body_tokens}\t{group.snippet_tokens}\t{flags}")
        return

    table = Table(title=f"Groups in '{manifest}'")
    table.add_column("Identifiers", style="cyan")
    table.add_column("Body", justify="right", style="magenta")
    table.add_column("Snippet", justify="right", style="magenta")
    table.add_column("Documented", justify="center")
    table.add_column("Deps", style="green")
    table.add_column("Used by", style="yellow")

    for group in result:
        table.add_row(
            escape(", ".join(group.ids)),
            str(group.body_tokens),
            str(group.snippet_tokens),
            "yes" if group.is_documented else "no",
            escape(", ".join(d.lead_id for d in group.direct_deps)),
            escape(", ".join(u.lead_id for u in group.used_by_deps)),
        )

    console.print(table)
    console.print(f"Found [bold blue]{len(result)}[/bold blue] groups.")


@app.command()
def bundle(
    manifest: Path = typer.Argument(..., help="Package manifest (JSON).", exists=True, dir_okay=False, readable=True),
    ids: List[str] = typer.Option(..., "--id", help="Identifier to bundle. Can be used multiple times."),
    budget: Optional[int] = typer.Option(None, "--budget", help="Prune the bundle to this many tokens."),
    package_docs: bool = PACKAGE_DOCS_OPTION,
    tests: bool = TESTS_OPTION,
    external: bool = EXTERNAL_OPTION,
    docs_policy: bool = DOCS_POLICY_OPTION,
    tokenizer: Optional[str] = TOKENIZER_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Renders the code bundle that describes the given identifiers.
    """
    try:
        options = _group_options(package_docs, tests, external, docs_policy, tokenizer)
        result = _load_groups(manifest, options)
    except ContextBundleError as e:
        print_error(str(e), code=type(e).__name__)
        raise typer.Exit(code=1)

    selected = filter_groups_for_identifiers(result, ids)
    if not selected:
        print_error(f"No groups contain identifiers: {', '.join(ids)}", code="IDENTIFIER_NOT_FOUND")
        raise typer.Exit(code=1)

    context = Context(selected)
    fits = True
    if budget is not None:
        fits = context.prune(budget)
        if not fits:
            logger.info(f"Bundle is {format_token_count(context.cost())}, over budget {format_token_count(budget)}")

    if json_output:
        payload = _context_summary(context)
        payload.update({"budget": budget, "fits": fits, "code": context.code()})
        print_json(payload)
    else:
        echo(context.code(), nl=False)
        print_metric("Cost", format_token_count(context.cost()))
        if context.identifiers_for_free():
            print_metric("Free identifiers", ", ".join(context.identifiers_for_free()))

    if not fits:
        raise typer.Exit(code=EXIT_OVER_BUDGET)


@app.command()
def partition(
    manifest: Path = typer.Argument(..., help="Package manifest (JSON).", exists=True, dir_okay=False, readable=True),
    ids: List[str] = typer.Option(..., "--id", help="Target identifier. Can be used multiple times."),
    package_docs: bool = PACKAGE_DOCS_OPTION,
    tests: bool = TESTS_OPTION,
    external: bool = EXTERNAL_OPTION,
    docs_policy: bool = DOCS_POLICY_OPTION,
    tokenizer: Optional[str] = TOKENIZER_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Splits target identifiers into the fewest bundles that describe them.
    """
    try:
        options = _group_options(package_docs, tests, external, docs_policy, tokenizer)
        result = _load_groups(manifest, options)
    except ContextBundleError as e:
        print_error(str(e), code=type(e).__name__)
        raise typer.Exit(code=1)

    contexts = partition_identifiers(result, ids)
    entries = []
    for context, covered in contexts.items():
        entry = _context_summary(context)
        entry["covered"] = covered
        entries.append(entry)

    if json_output:
        print_json({"contexts": entries})
        return

    if CLIConfig.is_machine_mode():
        for entry in entries:
            echo(f"{','.join(entry['covered'])}\t{entry['cost']}")
        return

    table = Table(title=f"{len(entries)} bundles for {len(ids)} identifiers")
    table.add_column("Covers", style="cyan")
    table.add_column("Added", style="green")
    table.add_column("Cost", justify="right", style="magenta")
    for entry in entries:
        table.add_row(
            escape(", ".join(entry["covered"])),
            escape(", ".join(entry["added_identifiers"])),
            format_token_count(entry["cost"]),
        )
    console.print(table)


@app.command()
def select(
    manifest: Path = typer.Argument(..., help="Package manifest (JSON).", exists=True, dir_okay=False, readable=True),
    budget: int = typer.Option(..., "--budget", help="Token budget for the bundle."),
    package_docs: bool = PACKAGE_DOCS_OPTION,
    tests: bool = TESTS_OPTION,
    external: bool = EXTERNAL_OPTION,
    docs_policy: bool = DOCS_POLICY_OPTION,
    tokenizer: Optional[str] = TOKENIZER_OPTION,
    json_output: bool = JSON_OPTION,
):
    """
    Picks undocumented groups, easiest first, into one bundle under a budget.
    """
    try:
        options = _group_options(package_docs, tests, external, docs_policy, tokenizer)
        result = _load_groups(manifest, options)
        context = build_budgeted_context(result, budget)
    except TokenBudgetExceededError as e:
        print_error(str(e), code="OVER_BUDGET")
        raise typer.Exit(code=EXIT_OVER_BUDGET)
    except ContextBundleError as e:
        print_error(str(e), code=type(e).__name__)
        raise typer.Exit(code=1)

    if json_output:
        payload = _context_summary(context)
        payload.update({"budget": budget, "code": context.code()})
        print_json(payload)
        return

    echo(context.code(), nl=False)
    print_metric("Selected", ", ".join(context.added_identifiers()))
    print_metric("Cost", f"{format_token_count(context.cost())} of {format_token_count(budget)}")


if __name__ == "__main__":
    app()
