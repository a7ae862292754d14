"""Command-line front end: ``sqlscaffold http ...``."""

from __future__ import annotations

import argparse
import sys

from sqlscaffold import __version__
from sqlscaffold.config import GenerationRequest, GeneratorConfig
from sqlscaffold.controller import GenerationController, GenerationResult
from sqlscaffold.errors import ScaffoldError
from sqlscaffold.translator import TemplateTranslator, load_schema_file
from sqlscaffold.utils import (
    print_error,
    print_panel,
    print_success,
    print_summary_table,
    print_warning,
    setup_logging,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sqlscaffold",
        description="sqlscaffold -- generate a web service project from database tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  sqlscaffold http -m github.com/acme/shop -s order_svc -p shop \\\n"
            "      -d 'root:123456@(127.0.0.1:3306)/shop' -t order\n"
            "  sqlscaffold http -m github.com/acme/shop -s order_svc -p shop -k mongodb \\\n"
            "      -d 'root:123456@127.0.0.1:27017/shop' -t order,item -o ./shop\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    http = subparsers.add_parser(
        "http",
        help="Generate a complete http service from database tables",
        description="Generate a complete http service from database tables",
    )
    http.add_argument(
        "--module-name", "-m",
        required=True,
        help="Module name of the generated project, e.g. github.com/acme/shop",
    )
    http.add_argument(
        "--server-name", "-s",
        required=True,
        help="Server name, e.g. order_svc",
    )
    http.add_argument(
        "--project-name", "-p",
        required=True,
        help="Project name, used for deployment names",
    )
    http.add_argument(
        "--repo-addr", "-r",
        default="",
        help="Docker image repository address, e.g. 192.168.3.37:9443/user-name",
    )
    http.add_argument(
        "--db-driver", "-k",
        default="mysql",
        help="Database driver: mysql, postgresql, tidb, sqlite or mongodb (default: mysql)",
    )
    http.add_argument(
        "--db-dsn", "-d",
        required=True,
        help="Database connection string",
    )
    http.add_argument(
        "--db-table", "-t",
        required=True,
        help="Table names, comma separated; the first table drives the service",
    )
    http.add_argument(
        "--embed",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Embed the shared base model struct (id and timestamps) in models",
    )
    http.add_argument(
        "--json-name-type", "-j",
        type=int,
        choices=(0, 1),
        default=1,
        help="JSON tag naming: 0 snake_case, 1 camelCase (default: 1)",
    )
    http.add_argument(
        "--out", "-o",
        default=None,
        help="Output directory (default: ./<server-name>_http_<time>)",
    )
    http.add_argument(
        "--schema-file",
        default=None,
        help="YAML or JSON file describing table columns",
    )
    http.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Show debug logging",
    )
    return parser


def run_http(args: argparse.Namespace) -> GenerationResult:
    """Validate the parsed arguments and run a generation."""
    request = GenerationRequest.create(
        module_namespace=args.module_name,
        service_name=args.server_name,
        project_name=args.project_name,
        repo_address=args.repo_addr,
        database_driver=args.db_driver,
        database_dsn=args.db_dsn,
        table_names=args.db_table.split(","),
        output_path=args.out,
        embed=args.embed,
        json_name_type=args.json_name_type,
    )
    catalog = load_schema_file(args.schema_file) if args.schema_file else None
    controller = GenerationController(
        config=GeneratorConfig.from_env(),
        translator=TemplateTranslator(catalog=catalog),
    )
    return controller.run(request)


def _print_result(result: GenerationResult) -> None:
    print_summary_table(
        {
            "Output": str(result.output_path),
            "Tables": ", ".join(result.tables),
            "Files": str(len(result.files)),
        },
        title="Generated service",
    )
    if result.configmap is None:
        print_warning("Kubernetes ConfigMap was not generated, run with --verbose for details")
    print_panel(
        "\n".join([
            "Next steps:",
            f"  cd {result.output_path}",
            "  make docs    # generate swagger api docs",
            "  make run     # build and run the service",
            "  open http://localhost:8080/swagger/index.html",
        ]),
        title="sqlscaffold",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``sqlscaffold`` and ``python -m sqlscaffold``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        result = run_http(args)
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    _print_result(result)
    print_success(f"Generation succeeded, output: {result.output_path}")


if __name__ == "__main__":
    main()
