import json

import yaml
from rich.console import Console

from kubectl_pod_dive.model import DiveResult
from kubectl_pod_dive.tree import render_result

# ----------------------------
# Output formatting
# ----------------------------


def print_lines(console: Console, lines: list[str], style: str | None = None) -> None:
    # tree labels look like rich markup, print them verbatim
    for line in lines:
        console.print(
            line, style=style, markup=False, highlight=False, emoji=False, soft_wrap=True
        )


def notice(console: Console, message: str) -> None:
    print_lines(console, [message], style="bright_cyan")


def error(console: Console, message: str) -> None:
    print_lines(console, [message], style="bright_red")


def output_result(result: DiveResult, fmt: str = "text", console: Console | None = None) -> None:
    """
    Print a dive.
    - text: the ASCII tree followed by waiting/termination diagnostics
    - json / yaml: the resolved model as a plain mapping
    """
    console = console or Console()

    if fmt == "json":
        print_lines(console, [json.dumps(result.to_dict(), indent=2)])
        return

    if fmt == "yaml":
        print_lines(console, [yaml.safe_dump(result.to_dict(), sort_keys=False).rstrip()])
        return

    # ----------------------------
    # Text output
    # ----------------------------
    notice(console, f"Diving after {result.pod.name}:")
    print_lines(console, [""] + render_result(result))
